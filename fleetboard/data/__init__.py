"""Sheet ingestion, record mapping, and the live record stores."""
from .schemas import InquiryRecord, InquiryStatus, ReportingWindow, ShipmentRecord
from .datasets import DATASETS, Dataset, get_dataset
from .loader import SheetIngestor, fetch_text, load_records, parse_csv_text

from .record_exporter import (
    CSV_MEDIA_TYPE,
    EXCEL_MEDIA_TYPE,
    export_csv,
    export_excel,
    export_multi_collection_excel,
    export_response_csv,
    export_response_excel,
    single_collection_type,
)

__all__ = [
    "CSV_MEDIA_TYPE",
    "EXCEL_MEDIA_TYPE",
    "export_csv",
    "export_excel",
    "export_multi_collection_excel",
    "export_response_csv",
    "export_response_excel",
    "single_collection_type",
]

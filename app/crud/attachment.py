"""
CRUD de archivos adjuntos.
"""
from typing import Any, Dict, List, Optional

from app.crud.base import CRUDBase
from app.db.session import Database


class CRUDAttachment(CRUDBase):
    """Operaciones sobre la tabla attachments."""

    def get_by_filename(self, db: Database, filename: str) -> Optional[Dict[str, Any]]:
        return db.fetch_one("SELECT * FROM attachments WHERE filename = :filename", {"filename": filename})

    def get_for(self, db: Database, related_table: str, related_id: int) -> List[Dict[str, Any]]:
        """Adjuntos de una entidad, más recientes primero."""
        return self.list_where(
            db,
            ["related_table = :related_table", "related_id = :related_id"],
            {"related_table": related_table, "related_id": related_id},
            order_by="uploaded_at DESC, id DESC"
        )


attachment = CRUDAttachment(
    "attachments",
    (
        "related_table", "related_id", "filename", "original_name", "file_path",
        "mime_type", "file_size", "description", "uploaded_by",
    ),
    soft_delete=False,
)

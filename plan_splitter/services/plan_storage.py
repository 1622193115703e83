"""
Plan storage services.

The segmentation engine writes each plan PDF through a PlanStorage and then
records it through a MetadataStore. Local-filesystem and in-memory
implementations are provided; production deployments plug in their own
object store and database behind the same two interfaces.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from plan_splitter.exceptions import StorageError
from plan_splitter.models.plan_models import PlanRecord

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


class PlanStorage(ABC):
    """Durable object storage for plan files"""

    @abstractmethod
    def upload(self, key: str, data: bytes, content_type: str = PDF_CONTENT_TYPE) -> None:
        """Store data under key; raises StorageError on failure"""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the object stored under key, if any"""


class MetadataStore(ABC):
    """Persistence for plan metadata records"""

    @abstractmethod
    def save(self, record: PlanRecord) -> PlanRecord:
        """Persist a record; raises StorageError on failure"""


class LocalPlanStorage(PlanStorage):
    """Stores plan files under a local directory, keyed by relative path"""

    def __init__(self, root_dir: Path):
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Initialized LocalPlanStorage at {self.root_dir}")

    def _path_for(self, key: str) -> Path:
        path = (self.root_dir / key).resolve()
        if self.root_dir.resolve() not in path.parents:
            raise StorageError(f"Storage key escapes storage root: {key}")
        return path

    def upload(self, key: str, data: bytes, content_type: str = PDF_CONTENT_TYPE) -> None:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to upload {key}: {str(e)}") from e
        logger.debug(f"Stored {len(data)} bytes at {path}")

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {key}: {str(e)}") from e
        logger.debug(f"Deleted {path}")


class JsonlMetadataStore(MetadataStore):
    """Appends plan records to a JSON-lines file"""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def save(self, record: PlanRecord) -> PlanRecord:
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(record.model_dump_json() + "\n")
        except OSError as e:
            raise StorageError(
                f"Failed to save record for {record.reference_number}: {str(e)}"
            ) from e
        return record

    def load(self) -> List[PlanRecord]:
        """Read back every stored record"""
        if not self.path.exists():
            return []
        with open(self.path, encoding="utf-8") as f:
            return [PlanRecord(**json.loads(line)) for line in f if line.strip()]


class InMemoryPlanStorage(PlanStorage):
    """Keeps plan files in a dict; used for dry runs and tests"""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}

    def upload(self, key: str, data: bytes, content_type: str = PDF_CONTENT_TYPE) -> None:
        self.objects[key] = data

    def delete(self, key: str) -> None:
        self.objects.pop(key, None)


class InMemoryMetadataStore(MetadataStore):
    """Keeps plan records in a list; used for dry runs and tests"""

    def __init__(self):
        self.records: List[PlanRecord] = []

    def save(self, record: PlanRecord) -> PlanRecord:
        self.records.append(record)
        return record

    def find(self, reference_number: str) -> Optional[PlanRecord]:
        for record in self.records:
            if record.reference_number == reference_number:
                return record
        return None

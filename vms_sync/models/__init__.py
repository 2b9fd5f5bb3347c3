# VMS Sync - Database Models
# Import all models here for SQLAlchemy discovery

from vms_sync.models.raw_camera import RawPayload, RawCamera, CameraFieldKeys   # noqa
from vms_sync.models.field_mapping import FieldMapping                         # noqa
from vms_sync.models.unified_camera import UnifiedCamera                       # noqa

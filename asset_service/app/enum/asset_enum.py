from enum import Enum


class AssetStatus(str, Enum):

    operational = "operational"
    maintenance = "maintenance"
    repair = "repair"
    retired = "retired"
    disposed = "disposed"
    lost = "lost"


class AssetCategory(str, Enum):

    hardware = "hardware"
    software = "software"
    furniture = "furniture"
    vehicle = "vehicle"
    equipment = "equipment"
    property = "property"
    other = "other"


class WorkOrderStatus(str, Enum):

    open = "open"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


# work orders that still block deleting their asset
OPEN_WORK_ORDER_STATUSES = (WorkOrderStatus.open.value, WorkOrderStatus.in_progress.value)


class AuditAction(str, Enum):

    create = "create"
    update = "update"
    delete = "delete"


class AssetSortField(str, Enum):

    name = "name"
    created_at = "created_at"
    updated_at = "updated_at"
    purchase_date = "purchase_date"
    purchase_price = "purchase_price"

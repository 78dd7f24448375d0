"""Core constants: document-store collection and field names.

The store has no DDL; these names are the single source of truth for where
each record type lives.
"""

from city_dashboard.domain.enums import RecordType

# Top-level collections
COLLECTION_SERVICES = "services"
COLLECTION_PROPERTIES = "properties"
COLLECTION_NEWS = "news"
COLLECTION_NOTIFICATIONS = "notifications"
COLLECTION_EMERGENCIES = "emergencies"
COLLECTION_BUSES_INTERNAL = "buses_internal"
COLLECTION_USERS = "users"

# Services are two-level: services/{categoryId}/items/{serviceId}
SUBCOLLECTION_SERVICE_ITEMS = "items"

FIELD_CREATED_AT = "createdAt"

RECORD_COLLECTIONS: dict[RecordType, str] = {
    RecordType.SERVICE: COLLECTION_SERVICES,
    RecordType.PROPERTY: COLLECTION_PROPERTIES,
    RecordType.NEWS: COLLECTION_NEWS,
    RecordType.NOTIFICATION: COLLECTION_NOTIFICATIONS,
    RecordType.EMERGENCY: COLLECTION_EMERGENCIES,
    RecordType.BUS_SCHEDULE: COLLECTION_BUSES_INTERNAL,
    RecordType.USER: COLLECTION_USERS,
}

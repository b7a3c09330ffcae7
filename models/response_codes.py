from enum import Enum

class ClientErrorFlags(Enum):
    # Authorization
    AUTHORIZATION_DENIED = "2:perm"
    INVALID_AUTH_STATE = "2:ias"

    # Catalogs
    INVALID_CATALOG = "2:icat"
    UNKNOWN_CAPABILITY = "2:ucap"

    # Editing sessions
    INVALID_SESSION_STATE = "2:iss"

class RemoteErrorFlags(Enum):
    # Call-level failures, no interpretable message
    TRANSPORT_FAILURE = "3:t"
    MALFORMED_RESPONSE = "3:malf"

    # Call completed, rejected with a message
    BUSINESS_REJECTION = "3:rej"

    # Aggregated, some updates of a batch were not applied
    PARTIAL_BATCH_FAILURE = "3:pbf"

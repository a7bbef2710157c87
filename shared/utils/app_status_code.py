class AppStatusCode:
    # success
    DATA_RETRIEVED_SUCCESSFULLY = "200"
    CREATED_SUCCESSFULLY = "201"
    UPDATED_SUCCESSFULLY = "202"
    DELETED_SUCCESSFULLY = "203"

    # generic failures
    OPERATION_FAILED = "100"
    OPERATION_ERROR = "101"
    INVALID_INPUT = "102"
    REQUIRED_VALIDATION_ERROR = "103"
    DUPLICATE_ADD_ERROR = "104"
    NOT_FOUND = "105"

    # authentication
    AUTHENTICATION_TOKEN_INVALID = "110"
    AUTHENTICATION_UNAUTHORIZED_ACCESS = "111"

    # asset hierarchy
    HIERARCHY_CYCLE_ERROR = "120"
    HIERARCHY_HAS_CHILDREN = "121"
    HIERARCHY_HAS_ACTIVE_WORK = "122"
    INVALID_STATUS_TRANSITION = "123"
    RELATIONSHIP_CONFLICT = "124"
    CUSTOM_FIELDS_INVALID = "125"

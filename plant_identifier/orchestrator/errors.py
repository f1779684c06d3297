ERR_BUSY = "BUSY"
ERR_NO_IMAGE = "NO_IMAGE"
ERR_BAD_REQUEST = "BAD_REQUEST"
ERR_DEVICE_UNAVAILABLE = "DEVICE_UNAVAILABLE"
ERR_PERMISSION_DENIED = "PERMISSION_DENIED"
ERR_NO_ACTIVE_SESSION = "NO_ACTIVE_SESSION"
ERR_MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
ERR_NETWORK_OR_MODEL = "NETWORK_OR_MODEL_ERROR"
ERR_PARSE = "PARSE_ERROR"
ERR_UNKNOWN = "UNKNOWN"


class PlantIdError(Exception):
    code = ERR_UNKNOWN


# Acquisition side: the current image and state stay as they were

class AcquisitionError(PlantIdError):
    pass


class DeviceUnavailable(AcquisitionError):
    code = ERR_DEVICE_UNAVAILABLE


class PermissionDenied(AcquisitionError):
    code = ERR_PERMISSION_DENIED


class NoActiveSession(AcquisitionError):
    code = ERR_NO_ACTIVE_SESSION


# Inference side: the request ends in FAILED

class InferenceError(PlantIdError):
    pass


class MissingCredential(InferenceError):
    code = ERR_MISSING_CREDENTIAL


class NetworkOrModelError(InferenceError):
    code = ERR_NETWORK_OR_MODEL


class ParseError(InferenceError):
    code = ERR_PARSE

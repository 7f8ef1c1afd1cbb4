class DbSetupException(Exception):
    """Base Exception Class"""
    pass

class ConfigurationError(DbSetupException):
    """Configuration Error"""
    pass

class ValidationError(DbSetupException):
    """Missing or empty credentials, rejected before any probe runs"""
    pass

class ConnectivityError(DbSetupException):
    """Probe-classified real failure (network, auth, unknown store error)"""
    def __init__(self, message, report=None):
        super().__init__(message)
        self.report = report

class ClientConstructionError(DbSetupException):
    """Client could not be built from the given endpoint/key"""
    pass

class ProbeClassificationAmbiguity(ConnectivityError):
    """Error message matched none of the known phrases"""
    pass

class InvalidTransition(DbSetupException):
    """Wizard event not allowed in the current state"""
    pass

class StorageError(DbSetupException):
    """Local configuration could not be read or written"""
    pass

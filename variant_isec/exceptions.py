class VariantIsecError(Exception):
    """Base exception for the package"""
    pass

class ConfigError(VariantIsecError):
    """Raised when the run configuration is invalid"""
    pass

class InputError(VariantIsecError):
    """Raised when input files cannot be opened or queried"""
    pass

class OutputError(VariantIsecError):
    """Raised when an output directory or file cannot be created"""
    pass

class IndexBuildError(OutputError):
    """Raised when indexing a subset file fails"""
    pass

class DataError(VariantIsecError):
    """Raised when an input stream yields malformed or unsorted records"""
    pass

class SandboxFSError(Exception):
    """Base exception for sandboxfs"""
    pass

class FileSystemError(SandboxFSError):
    """Base exception for filesystem operations"""
    pass

class FatalFileSystemError(FileSystemError):
    """Raised when the host filesystem is in a state the guest cannot recover from"""
    pass

class FileSystemInitError(FatalFileSystemError):
    """Raised when the sandbox root cannot be initialized"""
    pass

class HostCreateError(FatalFileSystemError):
    """Raised when a permitted host create (file, directory, work dir) fails"""
    pass

class InvalidFlagsProvider(FileSystemError):
    """Raised when no flag predicates exist for the requested guest ABI"""
    pass

class ConfigError(SandboxFSError):
    """Raised when the configuration file is unreadable or invalid"""
    pass

"""Error types shared by the core, the stores, and the CLI"""


class VaultlinkError(Exception):
    """Base class for all vaultlink errors."""


class StorageError(VaultlinkError):
    """Reading or writing a note's content failed."""

    def __init__(self, path: str, action: str, cause: Exception = None):
        self.path = path
        self.action = action
        msg = f"Failed to {action} {path}"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg)


class InputError(VaultlinkError):
    """A deep-link request was rejected before any resolution was attempted."""


class MissingIdError(InputError):
    def __init__(self):
        super().__init__("Persistent URL is missing an ID.")


class VaultMismatchError(InputError):
    def __init__(self, target_vault: str):
        self.target_vault = target_vault
        super().__init__(f'Persistent link targets "{target_vault}", open that vault first.')


class UnsupportedLinkError(InputError):
    def __init__(self, action: str):
        self.action = action
        super().__init__(f'Unsupported link action "{action}", expected "open-document".')

"""Process-wide context: identity, resource directory and logging."""

from __future__ import annotations

import enum
from typing import Any, Optional

from ranacore.screen_dim import ScreenDim
from ranacore.structured_log import Logger
from ranacore.utils import generate_uuid

RESOURCE_DIR_MAX_LEN = 2048
CORE_SYSTEM_STR_SIZE = 37
INFO_FILE_NAME = "info"
CONTAINER_ID_LOC = "/etc/hostname"
UNSET = "ERROR"


class ConnectionStatus(enum.IntEnum):
    """Outcome of initialising a connection."""

    SUCCESS = 0
    ABORT = 1
    KEY = 2
    EMAIL = 3
    LOCATION = 4
    WELCOME = 5
    REGISTER = 6


class KContextError(Exception):
    """Raised when the context cannot set up a connection."""


class KContext:
    """Holds the identity and shared services of a running core system."""

    def __init__(
        self,
        core_system: str,
        insecure: bool = False,
        client: Optional[Any] = None,
        container_id_path: str = CONTAINER_ID_LOC,
    ) -> None:
        if len(core_system) >= CORE_SYSTEM_STR_SIZE:
            raise ValueError(
                f"core system name longer than {CORE_SYSTEM_STR_SIZE - 1} characters"
            )
        self.uuid = UNSET
        self.insecure_mode = not insecure
        self.trace_uuid = generate_uuid()
        self.core_system = core_system
        self.system_resource_dir = UNSET
        self.container_id_path = container_id_path
        self.container_id: Optional[str] = None
        self.connection_initialized = False
        self.rana_initialized = False
        self.screen_dim = ScreenDim(0, 0, 0)
        self.recent_error = ""
        self.core_services_backbone = 0
        self.core_services_backbone_port = 0
        self.logger = Logger(core_system, self.trace_uuid, self.uuid, client)

    def set_system_resource_dir(self, path: str) -> None:
        """Record the directory that holds system resources."""
        if len(path) >= RESOURCE_DIR_MAX_LEN:
            raise ValueError(
                f"resource directory longer than {RESOURCE_DIR_MAX_LEN - 1} characters"
            )
        self.system_resource_dir = path

    def initialize_connection(self, uuid: str = "") -> ConnectionStatus:
        """Prepare the context's connection identity.

        Returns ABORT when no resource directory is set and SUCCESS when the
        connection is already or newly set up. Raises KContextError for a
        core system that cannot connect or an unreadable container id file.
        The ``uuid`` argument is currently unused; a fresh one is generated.
        """
        if self.system_resource_dir == UNSET:
            self.logger.error(
                {"message": "System resource directory has not been initialized."}
            )
            return ConnectionStatus.ABORT

        if self.connection_initialized:
            self.logger.warn({"message": "Ports have already been initialized."})
            return ConnectionStatus.SUCCESS

        if self.core_system == "RANA":
            self.logger.warn(
                {"message": "Do not attempt to initialize connection in Rana."}
            )
            raise KContextError("connections are not initialised in RANA")

        if self.core_system == "THEMIS":
            try:
                with open(self.container_id_path, encoding="utf-8") as handle:
                    self.container_id = handle.readline().rstrip("\n")
            except OSError as exc:
                message = "Could not open container id location."
                self.logger.error({"message": message})
                self.recent_error = message
                raise KContextError(message) from exc
            self.uuid = generate_uuid()
            return ConnectionStatus.SUCCESS

        self.logger.error({"message": "Unknown core system", "sys": self.core_system})
        raise KContextError(f"unknown core system: {self.core_system}")

    def close(self) -> None:
        """Release the logging client."""
        self.logger.close()

    def __enter__(self) -> "KContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
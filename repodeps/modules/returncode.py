# repodeps/modules/returncode.py
"""
Códigos de retorno usados por todo o repodeps.

O valor inteiro de cada código é também o exit code do processo.
"""

from enum import IntEnum


class ReturnCode(IntEnum):
    SUCCESS = 0
    REPOSITORY_NOT_FOUND = 1
    GIT_COMMAND_FAILED = 2
    BUILD_SCRIPT_FAILED = 3
    PACKAGE_MANAGER_COMMAND_FAILED = 4
    MANIFEST_NOT_FOUND = 5
    INVALID_MANIFEST = 6
    MANIFEST_ALREADY_EXISTS = 7
    CIRCULAR_DEPENDENCY = 8
    INVALID_COMMAND = 9

    @property
    def ok(self) -> bool:
        return self is ReturnCode.SUCCESS

    def describe(self) -> str:
        return self.name.lower().replace("_", " ")

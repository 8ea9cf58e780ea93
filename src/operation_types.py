from enum import StrEnum


class OperationType(StrEnum):
    NACHA_EXPORT = "nacha_export"
    NACHA_IMPORT = "nacha_import"

    @property
    def display_name(self) -> str:
        """Human-readable name for the job"""
        display_names = {
            OperationType.NACHA_EXPORT: "NACHA File Export",
            OperationType.NACHA_IMPORT: "NACHA Return Import",
        }
        return display_names.get(self, self.value.replace("_", " ").title())

"""In-cell editor with autocomplete over a column's dropdown options."""


class CellEditor:
    """Tracks the text being typed into one cell and the matching options.

    Filtering is a case-insensitive substring match. The dropdown is visible
    only while there is at least one match.
    """

    def __init__(self, options: list[str], initial_text: str = ""):
        self._options = list(options)
        self.text = initial_text

    @property
    def options(self) -> list[str]:
        return list(self._options)

    def type(self, text: str) -> list[str]:
        self.text = text
        return self.matches

    @property
    def matches(self) -> list[str]:
        needle = self.text.strip().lower()
        if not needle:
            return list(self._options)
        return [option for option in self._options if needle in option.lower()]

    @property
    def dropdown_visible(self) -> bool:
        return bool(self.matches)

    def select(self, option: str) -> str:
        if option not in self._options:
            raise ValueError(f"'{option}' is not an option for this cell")
        self.text = option
        return option

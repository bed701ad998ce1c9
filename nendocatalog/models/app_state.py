from dataclasses import dataclass, field, replace

from nendocatalog.models.criteria import DisplayMode, FilterCriteria


@dataclass(frozen=True)
class AppState:
    """
    Session state that shapes what the catalog shows.

    Immutable: mutations go through the with_* helpers, which return a new
    value.
    """

    mode: DisplayMode = DisplayMode.SEPARATE
    show_variant: bool = False
    language: str = "en"
    criteria: FilterCriteria = field(default_factory=FilterCriteria)

    def with_mode(self, mode: DisplayMode) -> "AppState":
        return replace(self, mode=mode)

    def with_show_variant(self, show_variant: bool) -> "AppState":
        return replace(self, show_variant=show_variant)

    def with_language(self, language: str) -> "AppState":
        # Filters survive a language switch
        return replace(self, language=language)

    def with_criteria(self, criteria: FilterCriteria) -> "AppState":
        return replace(self, criteria=criteria)

    def cleared(self) -> "AppState":
        return replace(self, criteria=FilterCriteria())

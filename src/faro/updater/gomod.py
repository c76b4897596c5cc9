"""Go modules updater."""

from typing import List

from faro.constants import PackageManager
from faro.models import Module
from faro.updater.base import Updater, pinned


class GoUpdater(Updater):
    """Runs ``go get path@version ...`` followed by ``go mod tidy``."""

    @property
    def manager(self) -> PackageManager:
        return PackageManager.GO

    def _apply(self, modules: List[Module]) -> None:
        self._run(["go", "get", *(pinned(m) for m in modules)])
        self._run(["go", "mod", "tidy"])

"""npm-family updaters (npm, yarn, pnpm)."""

from typing import List, Tuple

from faro.constants import PackageManager
from faro.models import Module
from faro.scanner.npm import DEV_DEPENDENCIES
from faro.updater.base import Updater, pinned


def split_dev(modules: List[Module]) -> Tuple[List[str], List[str]]:
    """Partition into (regular, dev) ``name@version`` specs."""
    regular = [pinned(m) for m in modules if m.dependency_type != DEV_DEPENDENCIES]
    dev = [pinned(m) for m in modules if m.dependency_type == DEV_DEPENDENCIES]
    return regular, dev


class NpmUpdater(Updater):
    """``npm install --save`` for dependencies, ``--save-dev`` for devDependencies."""

    install = ("npm", "install", "--save")
    install_dev = ("npm", "install", "--save-dev")

    @property
    def manager(self) -> PackageManager:
        return PackageManager.NPM

    def _apply(self, modules: List[Module]) -> None:
        regular, dev = split_dev(modules)
        if regular:
            self._run([*self.install, *regular])
        if dev:
            self._run([*self.install_dev, *dev])


class YarnUpdater(NpmUpdater):
    install = ("yarn", "add")
    install_dev = ("yarn", "add", "--dev")

    @property
    def manager(self) -> PackageManager:
        return PackageManager.YARN


class PnpmUpdater(NpmUpdater):
    install = ("pnpm", "add")
    install_dev = ("pnpm", "add", "--save-dev")

    @property
    def manager(self) -> PackageManager:
        return PackageManager.PNPM

"""Tests for the link registry (load, save, add, remove, find)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import yaml

from snow.config import get_registry_path
from snow.errors import RegistryCorruptError
from snow.registry import delete_registry_file, load, save
from snow.types import LinkRegistry

if TYPE_CHECKING:
    from pathlib import Path


def _registry() -> LinkRegistry:
    registry = LinkRegistry()
    registry.add("vim", "/p/vim/.vimrc", "/h/.vimrc")
    registry.add("vim", "/p/vim/.vim", "/h/.vim")
    registry.add("zsh", "/p/zsh/.zshrc", "/h/.zshrc")
    return registry


class TestLinkRegistry:
    def test_add_appends_in_order(self) -> None:
        registry = _registry()
        assert [r.symlink for r in registry.list_links()] == ["/h/.vimrc", "/h/.vim", "/h/.zshrc"]

    def test_add_replaces_record_for_same_symlink(self) -> None:
        registry = _registry()
        registry.add("nvim", "/p/nvim/.vimrc", "/h/.vimrc")
        records = registry.list_links()
        assert len(records) == 3
        assert records[-1].package == "nvim"
        assert sum(1 for r in records if r.symlink == "/h/.vimrc") == 1

    def test_remove_by_removes_every_record_of_package(self) -> None:
        registry = _registry()
        removed = registry.remove_by("vim")
        assert [r.symlink for r in removed] == ["/h/.vimrc", "/h/.vim"]
        assert [r.package for r in registry.list_links()] == ["zsh"]

    def test_remove_by_unknown_package_is_noop(self) -> None:
        registry = _registry()
        assert registry.remove_by("emacs") == []
        assert len(registry.list_links()) == 3

    def test_remove_symlink_removes_single_record(self) -> None:
        registry = _registry()
        record = registry.remove_symlink("/h/.vim")
        assert record is not None
        assert record.origin == "/p/vim/.vim"
        assert [r.symlink for r in registry.find_all("vim")] == ["/h/.vimrc"]

    def test_remove_symlink_unknown_returns_none(self) -> None:
        assert _registry().remove_symlink("/h/missing") is None

    def test_find_returns_first_record(self) -> None:
        record = _registry().find("vim")
        assert record is not None
        assert record.symlink == "/h/.vimrc"

    def test_find_unknown_returns_none(self) -> None:
        assert _registry().find("emacs") is None

    def test_list_is_a_copy(self) -> None:
        registry = _registry()
        registry.list_links().clear()
        assert len(registry.list_links()) == 3


class TestRegistryPersistence:
    @pytest.fixture(autouse=True)
    def _setup(self, tmp_path: Path) -> None:
        self.path = tmp_path / "state" / ".snowlock"

    def test_load_missing_file_returns_empty_registry(self) -> None:
        assert load(self.path).list_links() == []

    def test_save_load_roundtrip_keeps_order(self) -> None:
        save(_registry(), self.path)
        loaded = load(self.path)
        assert loaded == _registry()

    def test_save_leaves_no_temp_file(self) -> None:
        save(_registry(), self.path)
        assert [p.name for p in self.path.parent.iterdir()] == [".snowlock"]

    def test_saved_file_is_yaml_triples(self) -> None:
        save(_registry(), self.path)
        raw = yaml.safe_load(self.path.read_text())
        assert raw["version"] == "0.1.0"
        assert raw["links"][0] == {"package": "vim", "origin": "/p/vim/.vimrc", "symlink": "/h/.vimrc"}

    def test_empty_file_is_empty_registry(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("")
        assert load(self.path).list_links() == []

    def test_malformed_yaml_raises(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("links: [unclosed\n")
        with pytest.raises(RegistryCorruptError):
            load(self.path)

    def test_non_mapping_raises(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("- just\n- a list\n")
        with pytest.raises(RegistryCorruptError):
            load(self.path)

    def test_invalid_record_raises(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(yaml.safe_dump({"links": [{"package": "", "origin": "/a", "symlink": "/b"}]}))
        with pytest.raises(RegistryCorruptError):
            load(self.path)

    def test_missing_field_raises(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(yaml.safe_dump({"links": [{"package": "vim", "origin": "/a"}]}))
        with pytest.raises(RegistryCorruptError):
            load(self.path)

    def test_relative_path_raises(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(yaml.safe_dump({"links": [{"package": "vim", "origin": "vim/.vimrc", "symlink": "/h/.vimrc"}]}))
        with pytest.raises(RegistryCorruptError):
            load(self.path)

    def test_duplicate_symlink_raises(self) -> None:
        record = {"package": "vim", "origin": "/p/vim/.vimrc", "symlink": "/h/.vimrc"}
        self.path.parent.mkdir(parents=True)
        self.path.write_text(yaml.safe_dump({"links": [record, {**record, "package": "nvim"}]}))
        with pytest.raises(RegistryCorruptError):
            load(self.path)

    def test_newer_version_raises(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(yaml.safe_dump({"version": "99.0.0", "links": []}))
        with pytest.raises(RegistryCorruptError):
            load(self.path)

    def test_delete_registry_file(self) -> None:
        save(_registry(), self.path)
        delete_registry_file(self.path)
        assert not self.path.exists()

    def test_delete_missing_registry_file_is_not_an_error(self) -> None:
        delete_registry_file(self.path)
        assert not self.path.exists()


class TestRegistryLocation:
    def test_default_path_follows_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        lockfile = tmp_path / "custom.lock"
        monkeypatch.setenv("SNOW_LOCKFILE", str(lockfile))
        save(_registry(), None)
        assert get_registry_path() == lockfile
        assert lockfile.exists()
        assert len(load().list_links()) == 3

    def test_default_path_is_in_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SNOW_LOCKFILE", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.chdir(tmp_path)
        assert get_registry_path() == tmp_path / ".snowlock"

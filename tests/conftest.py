import pytest

import staticconfig


@pytest.fixture(autouse=True)
def isolated_default_store(tmp_path, monkeypatch):
    """Point the process-wide store at a temporary directory."""
    root = tmp_path / "default_root"
    root.mkdir()
    monkeypatch.setattr(staticconfig.default_store, "root_dir", root)
    monkeypatch.setattr(
        staticconfig.default_store, "settings", staticconfig.SerializerSettings()
    )
    return root

"""Feature-level fixtures for translation runtime tests."""

import pytest

from i18n_runtime.hashing import derive_key


@pytest.fixture
def temp_translations_dir(tmp_path):
    """Create temporary directory with sample YAML translation files.

    Returns a directory structure like:
    - common.pt.yml
    - errors.pt.yml
    - common.pt-BR.yml
    - broken.es.yml
    - sources.yml
    """
    (tmp_path / "common.pt.yml").write_text(
        f'"{derive_key("Hello World")}": "Olá Mundo"\n'
        f'"{derive_key("Goodbye")}": "Adeus"\n',
        encoding="utf-8",
    )
    (tmp_path / "errors.pt.yml").write_text(
        f'"{derive_key("Not found")}": "Não encontrado"\n'
        '"00001234": "Chave com zeros"\n',
        encoding="utf-8",
    )
    (tmp_path / "common.pt-BR.yml").write_text(
        f'"{derive_key("Goodbye")}": "Tchau"\n', encoding="utf-8"
    )
    (tmp_path / "broken.es.yml").write_text("key: [unclosed\n", encoding="utf-8")
    (tmp_path / "sources.yml").write_text(
        f'"{derive_key("Hello World")}": "Hello World"\n'
        f'"{derive_key("Submit", "form")}":\n'
        "  text: Submit\n"
        "  context: form\n",
        encoding="utf-8",
    )
    return tmp_path

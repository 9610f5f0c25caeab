import io
import json
import logging
import os

import pytest

from reactprops.config import ExtractorConfig
from reactprops.extractors.react_extractor import ReactComponentExtractor
from reactprops.log import configure_logging, get_logger
from reactprops.main import analyze_react_file, collect_source_files, create_component_data
from reactprops.parser import ParseError, ReactPropsError, get_dialect, parse_code
from reactprops.registry.extractor_registry import get_extractor

HERE = os.path.dirname(__file__)
SAMPLE_APP = os.path.join(HERE, "fixtures", "sample_app")


@pytest.fixture(scope="module")
def output(tmp_path_factory):
    out = tmp_path_factory.mktemp("components")
    processed = create_component_data(SAMPLE_APP, output_base=str(out), workers=2,
                                      config=ExtractorConfig())
    return out, processed


def test_ignored_directories_not_collected():
    from pathlib import Path
    rel = {str(p.relative_to(SAMPLE_APP)).replace(os.sep, "/") for p, _ in collect_source_files(Path(SAMPLE_APP))}
    assert rel == {"src/Broken.tsx", "src/components/Button.tsx", "src/components/Card.jsx", "src/utils.ts"}


def test_one_json_per_file(output):
    out, processed = output
    assert {p["filename"] for p in processed} == {
        "src/components/Button.tsx", "src/components/Card.jsx", "src/utils.ts",
    }
    assert (out / "src" / "components" / "Button.json").exists()
    assert (out / "src" / "utils.json").exists()
    assert not (out / "src" / "Broken.json").exists()


def test_written_component(output):
    out, _ = output
    with open(out / "src" / "components" / "Button.json", encoding="utf-8") as f:
        button = json.load(f)
    assert button == {
        "type": "tsx",
        "filename": "src/components/Button.tsx",
        "components": [{
            "name": "Button",
            "props": {
                "label": {"type": "string", "optional": False},
                "disabled": {"type": "boolean", "optional": True, "defaultValue": "false"},
                "onClick": {"type": "function", "returnType": {"type": "void"}, "parameters": [],
                            "optional": False},
            },
        }],
    }


def test_index_lists_files_with_components(output):
    out, _ = output
    with open(out / "index.json", encoding="utf-8") as f:
        index = json.load(f)
    assert [entry["filename"] for entry in index] == ["src/components/Button.tsx", "src/components/Card.jsx"]
    card = index[1]
    assert card["type"] == "jsx"
    assert card["components"][0]["props"] == {
        "title": {"type": "unknown", "optional": False},
        "body": {"type": "object", "props": {"text": {"type": "unknown", "optional": False}}, "optional": False},
    }


def test_parse_error_is_raised():
    with pytest.raises(ParseError) as excinfo:
        analyze_react_file("Broken.tsx", "export function Broken( {\n  return <div>;\n")
    assert isinstance(excinfo.value, ReactPropsError)
    assert excinfo.value.filename == "Broken.tsx"
    assert excinfo.value.line is not None


def test_lenient_parse_keeps_going():
    code = "export function Ok(props) { return <div>{props.a}</div>; }\nconst = ;\n"
    react_file = analyze_react_file("Ok.tsx", code, ExtractorConfig(strict_parse=False))
    assert [c.name for c in react_file.components] == ["Ok"]


def test_plain_typescript_grammar_for_ts_files():
    # generic arrow functions only parse without markup
    code, tree = parse_code("util.ts", "export const id = <T>(value: T): T => value;\n")
    assert not tree.root_node.has_error


@pytest.mark.parametrize("filename, dialect", [
    ("A.tsx", "tsx"),
    ("A.jsx", "jsx"),
    ("A.js", "jsx"),
    ("A.ts", "jsx"),
])
def test_dialect(filename, dialect):
    assert get_dialect(filename) == dialect


def test_registry():
    for language in ("typescript", "javascript", "tsx", "JSX"):
        assert isinstance(get_extractor(language), ReactComponentExtractor)
    with pytest.raises(ValueError):
        get_extractor("haskell")


def test_extractor_interface(tmp_path):
    source = tmp_path / "Hello.jsx"
    source.write_text("export const Hello = (props) => <p>{props.name}</p>;\n", encoding="utf-8")
    extractor = ReactComponentExtractor()
    assert extractor.extract_all_components() == []
    extractor.process_file(str(source), filename="Hello.jsx")
    assert extractor.extract_all_components() == [
        {"name": "Hello", "props": {"name": {"type": "unknown", "optional": False}}},
    ]
    target = tmp_path / "Hello.json"
    extractor.write_to_file(str(target))
    assert json.loads(target.read_text(encoding="utf-8"))["filename"] == "Hello.jsx"


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("REACTPROPS_MAX_PARAMS", "5")
    monkeypatch.setenv("REACTPROPS_STRICT_PARSE", "off")
    config = ExtractorConfig.from_env()
    assert config.max_component_params == 5
    assert config.strict_parse is False

    monkeypatch.delenv("REACTPROPS_MAX_PARAMS")
    monkeypatch.delenv("REACTPROPS_STRICT_PARSE")
    assert ExtractorConfig.from_env() == ExtractorConfig()


def test_logging_subsystem_filter():
    stream = io.StringIO()
    try:
        configure_logging("function", stream=stream)
        get_logger("function").info("visible")
        get_logger("resolver").info("hidden")
        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("<function>  ")
        assert lines[0].endswith(" visible")
    finally:
        configure_logging("")
    assert logging.getLogger("reactprops").level == logging.WARNING


def test_logging_does_not_change_results():
    code = "export const A = ({ x = 1 }) => <div />;\n"
    quiet = analyze_react_file("A.tsx", code).to_dict()
    try:
        configure_logging("*", stream=io.StringIO())
        loud = analyze_react_file("A.tsx", code).to_dict()
    finally:
        configure_logging("")
    assert quiet == loud

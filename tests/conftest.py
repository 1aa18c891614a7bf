"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides a small compiled qooxdoo project for context and feature tests.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
import structlog

if TYPE_CHECKING:
    from qxlens.config.models import QxLensConfig
    from qxlens.context import ProjectContext

# Insert local src directory at the beginning of sys.path
# This ensures that the local qxlens package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of qxlens modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("qxlens"):
        del sys.modules[module_name]

BASE_SOURCE = """qx.Class.define("my.Base", {
  extend: qx.core.Object,

  properties: {
    label: { check: "String", init: "" }
  },

  members: {
    configure(options, target) {
      return this;
    }
  }
});
"""

OTHER_WIDGET_SOURCE = """qx.Class.define("my.OtherWidget", {
  extend: my.Base,

  construct(name) {
    super();
  },

  members: {
    bar(count) {
      return this;
    },

    baz: null
  },

  statics: {
    create() {
      return new my.OtherWidget("x");
    }
  }
});
"""

WIDGET_SOURCE = """qx.Class.define("my.Widget", {
  extend: my.Base,

  members: {
    build(other) {
      var w = new my.OtherWidget("x");
      w.bar(1, );
      w.getLabel();
      w.ba
    },

    configure(options, target) {
      target.
    }
  }
});
"""


def span(source: str, start_marker: str, end_marker: str | None = None) -> dict[str, Any]:
    """Location map from the first *start_marker* to the *end_marker* after it."""
    start = source.index(start_marker)
    if end_marker is None:
        end = len(source) - 1
    else:
        end = source.index(end_marker, start) + len(end_marker)

    def position(index: int) -> dict[str, int]:
        line_start = source.rfind("\n", 0, index) + 1
        return {
            "line": source.count("\n", 0, index) + 1,
            "column": index - line_start,
            "index": index,
        }

    return {"start": position(start), "end": position(end)}


def method(
    returns: str | None = None,
    params: list[tuple[str, str]] | None = None,
    description: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Compiler-style member entry for a documented function."""
    jsdoc: dict[str, Any] = {}
    if returns:
        jsdoc["@return"] = [{"type": returns}]
    if params:
        jsdoc["@param"] = [
            {"paramName": name, "type": type_, "description": f"the {name}"}
            for name, type_ in params
        ]
    if description:
        jsdoc["@description"] = [{"body": description}]
    entry: dict[str, Any] = {"type": "function", **extra}
    if jsdoc:
        entry["jsdoc"] = jsdoc
    return entry


def project_records() -> list[dict[str, Any]]:
    """Metadata of the fixture project, located against the sources above."""
    return [
        {
            "className": "qx.core.Object",
            "members": {
                "toString": method(
                    returns="String",
                    location={
                        "start": {"line": 40, "column": 4, "index": 900},
                        "end": {"line": 42, "column": 5, "index": 960},
                    },
                )
            },
        },
        {
            "className": "my.Base",
            "superClass": "qx.core.Object",
            "location": span(BASE_SOURCE, "qx.Class.define"),
            "members": {
                "configure": method(
                    returns="my.Base",
                    params=[("options", "Map"), ("target", "my.OtherWidget")],
                    description="Applies options to a target widget.",
                    location=span(BASE_SOURCE, "configure(", "    }"),
                ),
            },
            "properties": {
                "label": {
                    "json": {"check": "String"},
                    "location": span(BASE_SOURCE, "label:", "}"),
                    "jsdoc": {"@description": [{"body": "Text shown on the widget."}]},
                },
            },
        },
        {
            "className": "my.OtherWidget",
            "superClass": "my.Base",
            "location": span(OTHER_WIDGET_SOURCE, "qx.Class.define"),
            "construct": method(
                params=[("name", "String")],
                location=span(OTHER_WIDGET_SOURCE, "construct(", "  },"),
            ),
            "members": {
                "bar": method(
                    returns="my.Base",
                    params=[("count", "Number")],
                    description="Does bar.",
                    location=span(OTHER_WIDGET_SOURCE, "bar(count)", "    },"),
                ),
                "baz": {
                    "type": "variable",
                    "location": span(OTHER_WIDGET_SOURCE, "baz:", "null"),
                    "jsdoc": {"@type": [{"body": "{qx.data.Array<String>} items"}]},
                },
            },
            "statics": {
                "create": method(
                    returns="my.OtherWidget",
                    location=span(OTHER_WIDGET_SOURCE, "create()", "    }"),
                ),
            },
        },
        {
            "className": "my.Widget",
            "superClass": "my.Base",
            "location": span(WIDGET_SOURCE, "qx.Class.define"),
            "members": {
                "build": method(
                    params=[("other", "my.OtherWidget")],
                    location=span(WIDGET_SOURCE, "build(other)", "    },"),
                ),
                "configure": method(
                    overriddenFrom="my.Base",
                    location=span(WIDGET_SOURCE, "configure(", "    }\n  }"),
                ),
            },
        },
        {"className": "my.Registry", "superClass": "qx.core.Object", "isSingleton": True},
    ]


def write_record(root: Path, data: dict[str, Any]) -> Path:
    path = root / "compiled" / "source" / "transpiled" / Path(*data["className"].split("."))
    path = path.with_suffix(".json")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))
    return path


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo process-wide logging setup made by a test."""
    from qxlens.core.logging import clear_request_id

    yield
    for handler in logging.getLogger().handlers:
        handler.close()
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
    clear_request_id()


@pytest.fixture
def qx_project(tmp_path: Path) -> Path:
    """A compiled qooxdoo project with five classes and three class sources."""
    for data in project_records():
        write_record(tmp_path, data)
    sources = {
        "my/Base.js": BASE_SOURCE,
        "my/OtherWidget.js": OTHER_WIDGET_SOURCE,
        "my/Widget.js": WIDGET_SOURCE,
    }
    for relative, text in sources.items():
        path = tmp_path / "source" / "class" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    return tmp_path


@pytest.fixture
def qx_config() -> QxLensConfig:
    from qxlens.config.models import QxLensConfig, WatchConfig

    return QxLensConfig(watch=WatchConfig(enabled=False))


@pytest.fixture
def qx_context(qx_project: Path, qx_config: QxLensConfig) -> Iterator[ProjectContext]:
    """Initialized context over ``qx_project``."""
    from qxlens.context import ProjectContext

    ctx = ProjectContext(qx_project, qx_config)
    asyncio.run(ctx.initialize())
    yield ctx
    asyncio.run(ctx.dispose())

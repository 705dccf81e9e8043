"""Scaffold editor script handed to agents for editing.

The agent fills in `CreateScene`; once the file is compiled by the editor the
bootstrap class runs it on the next editor update.
"""
from __future__ import annotations

SCAFFOLD_CLASS = "SceneCreator"
SCAFFOLD_ENTRY_POINT = "CreateScene"

_SCAFFOLD_TEMPLATE = """\
using UnityEngine;
using UnityEditor;
using UnityEditor.SceneManagement;
using System.Collections.Generic;
using System.IO;

public class {class_name} : EditorWindow
{{
    private string sceneName = "New Scene";

    [MenuItem("Tools/Scene Creator/Create Scene")]
    public static void {entry_point}()
    {{
        // Build the scene here.
    }}
}}

static class Auto{class_name}
{{
    [InitializeOnLoadMethod]
    private static void Initialize()
    {{
        EditorApplication.delayCall += () => {{
            {class_name}.{entry_point}();
        }};
    }}
}}
"""


def build_scaffold(query: str = "") -> str:
    """Return the scaffold script.

    `query` is accepted for the tool signature but does not influence the
    output: the agent applies the request itself when it edits the scaffold.
    """
    return _SCAFFOLD_TEMPLATE.format(class_name=SCAFFOLD_CLASS, entry_point=SCAFFOLD_ENTRY_POINT)


def unescape_transport_quotes(source: str) -> str:
    """Undo `\\"` escaping some clients leave in submitted source."""
    return source.replace('\\"', '"')

"""JavaScript prelude implementing the marker helpers for one language."""

from __future__ import annotations

import json

from jsxtv.language import Language


_RUNTIME_TEMPLATE = """\
/* jsxtv runtime ({name}) */
const __jsxtvLanguage = {table};
function getLanguageString(type, targets, args, context) {{
  let node = __jsxtvLanguage[type];
  (targets || []).forEach((target) => {{
    if (node && node[target]) {{
      node = node[target];
    }}
  }});
  if (typeof node !== 'string') {{
    return '';
  }}
  const ctx = typeof context === 'number' ? context : 0;
  const base = __jsxtvLanguage.contextBase;
  const values = (args || []).map((arg) => (arg !== null && typeof arg === 'object' ? arg.value : arg));
  return node.replace(/\\|\\|%(\\d+|var|subVar)\\|\\|/g, (match, token) => {{
    if (token === 'var') {{
      return ctx === 0 ? base : base + '_' + ctx;
    }}
    if (token === 'subVar') {{
      return base + '_' + (ctx + 1);
    }}
    const value = values[Number(token) - 1];
    return value === undefined || value === null ? '' : String(value);
  }});
}}
function getLanguageReplace(target, arg, context) {{
  return getLanguageString('replace', [target], [arg], context);
}}
function getLanguageList(target, arg, context) {{
  return getLanguageString('list', [target], [arg], context);
}}
function getLanguageControl(targets, args, context) {{
  return getLanguageString('control', targets, args, context);
}}
"""


def runtime_table(language: Language) -> dict[str, object]:
    return {"name": language.name, "contextBase": language.context_base, **language.table()}


def render_runtime(language: Language) -> str:
    """Emit the helper functions with `language`'s table inlined as JSON."""
    table = json.dumps(runtime_table(language), indent=2, ensure_ascii=False)
    return _RUNTIME_TEMPLATE.format(name=language.name, table=table)

"""Mako templates for generated file layouts.

Bodies are pre-rendered strings; the templates only arrange them into a
module wrapper or a resource-mode file.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from mako.template import Template

HEADER = """/**
 * Route helpers generated by routes-js. Do not edit manually.
 */"""

# Global namespace used by the UMD and global module types
NAMESPACE = "Routes"

ESM_TEMPLATE = Template(
    """${header}

${body}

export {
% for name in exports:
  ${name},
% endfor
};
% if helper_exports:
export { ${", ".join(helper_exports)} };
% endif
"""
)

CJS_TEMPLATE = Template(
    """${header}

${body}

module.exports = {
% for name in exports:
  ${name},
% endfor
};
"""
)

UMD_TEMPLATE = Template(
    """${header}
(function (root, factory) {
  if (typeof define === 'function' && define.amd) {
    define([], factory);
  } else if (typeof module === 'object' && module.exports) {
    module.exports = factory();
  } else {
    root.${namespace} = factory();
  }
})(typeof self !== 'undefined' ? self : this, function () {
${body}

  return {
% for name in exports:
    ${name},
% endfor
  };
});
"""
)

GLOBAL_TEMPLATE = Template(
    """${header}
(function (root) {
${body}

  root.${namespace} = {
% for name in exports:
    ${name},
% endfor
  };
})(typeof globalThis !== 'undefined' ? globalThis : this);
"""
)

MODULE_TEMPLATES = {
    "esm": ESM_TEMPLATE,
    "cjs": CJS_TEMPLATE,
    "umd": UMD_TEMPLATE,
    None: GLOBAL_TEMPLATE,
}

RESOURCE_FILE_TEMPLATE = Template(
    """${import_line}

% for block in blocks:
${block}

% endfor
export const ${name} = {
% for prop in properties:
  ${prop},
% endfor
} as const;

export { ${", ".join(bindings)} };
"""
)

INDEX_TEMPLATE = Template(
    """% for binding, source in resources:
export { ${binding} } from './${source}';
% endfor
% for binding, source in scopes:
export * as ${binding} from './${source}';
% endfor
% if runtime_types:

// Runtime types
export type { Route, RouteOptions, FormAttrs, Param, Method } from '${runtime_path}';
% endif
"""
)


def render_module(module_type: Optional[str], body: str, exports: Sequence[str],
                  helper_exports: Sequence[str] = ()) -> str:
    template = MODULE_TEMPLATES[module_type]
    return template.render(
        header=HEADER,
        body=body,
        exports=list(exports),
        helper_exports=list(helper_exports),
        namespace=NAMESPACE,
    )


def render_resource_file(import_line: str, blocks: Sequence[str], name: str,
                         properties: Sequence[str], bindings: Sequence[str]) -> str:
    return RESOURCE_FILE_TEMPLATE.render(
        import_line=import_line,
        blocks=list(blocks),
        name=name,
        properties=list(properties),
        bindings=list(bindings),
    )


def render_index(resources: Sequence[Tuple[str, str]], scopes: Sequence[Tuple[str, str]],
                 runtime_path: Optional[str] = None) -> str:
    """Barrel file from (binding, module) pairs.

    Runtime types are re-exported only from the top-level index.
    """
    text = INDEX_TEMPLATE.render(
        resources=list(resources),
        scopes=list(scopes),
        runtime_types=runtime_path is not None,
        runtime_path=runtime_path or "",
    )
    return text.lstrip("\n")

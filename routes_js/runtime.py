"""JavaScript/TypeScript runtime sources embedded into generated files.

ROUTE_BUILDER_JS evaluates serialized route trees (see serializer.py for the
wire format). RICH_HELPERS_JS and FORM_HELPER_JS back the rich variant.
wayfinder_runtime() is the `route()` factory used by resource mode.
"""

ROUTE_BUILDER_JS = r"""/**
 * Builds paths from serialized route trees.
 *
 * Tree nodes: "literal", ["param", name], ["glob", name], ["optional", [...nodes]].
 */
class RouteBuilder {
  constructor(options = {}) {
    this.defaultUrlOptions = options.defaultUrlOptions || {};
    this.trailingSlash = options.trailingSlash === true;
  }

  configure(options = {}) {
    if (options.defaultUrlOptions !== undefined) this.defaultUrlOptions = options.defaultUrlOptions;
    if (options.trailingSlash !== undefined) this.trailingSlash = options.trailingSlash;
  }

  route(paramDefs, spec, absolute = false) {
    const builder = this;
    const helper = function (...args) {
      return builder.build(paramDefs, spec, args, absolute);
    };
    helper.requiredParams = () => Object.keys(paramDefs).filter((key) => paramDefs[key].required === true);
    helper.toString = () => builder.specToString(spec);
    return helper;
  }

  build(paramDefs, spec, args, absolute) {
    const { params, options } = this.extractArgs(paramDefs, args);
    const missing = Object.keys(paramDefs).filter((key) => paramDefs[key].required && params[key] == null);
    if (missing.length > 0) {
      throw new Error(`Missing required parameter(s): ${missing.join(', ')}`);
    }

    let path = spec.map((node) => this.evaluate(node, params)).join('');
    if (path === '') path = '/';
    const trailingSlash = options.trailing_slash !== undefined ? options.trailing_slash : this.trailingSlash;
    if (trailingSlash) {
      if (!path.endsWith('/')) path += '/';
    } else if (path.length > 1) {
      path = path.replace(/\/+$/, '') || '/';
    }

    const query = this.buildQueryString(paramDefs, options);
    if (query) path += '?' + query;
    if (options.anchor) path += '#' + encodeURIComponent(options.anchor);
    return absolute ? this.origin(options) + path : path;
  }

  // Positional required params, then an optional trailing options object.
  // A single object argument may carry params and options together.
  extractArgs(paramDefs, args) {
    const required = Object.keys(paramDefs).filter((key) => paramDefs[key].required);
    const params = {};
    let options = {};
    let positional = args;

    const last = args[args.length - 1];
    if (isPlainObject(last) && (args.length > required.length || args.length === 1)) {
      options = last;
      positional = args.slice(0, -1);
    }

    required.forEach((key, index) => {
      if (index < positional.length) params[key] = toParam(positional[index]);
    });
    Object.keys(paramDefs).forEach((key) => {
      if (options[key] !== undefined) params[key] = toParam(options[key]);
      if (params[key] === undefined && paramDefs[key].default !== undefined) {
        params[key] = paramDefs[key].default;
      }
    });
    return { params, options };
  }

  evaluate(node, params) {
    if (typeof node === 'string') return node;
    const [type, value] = node;
    switch (type) {
      case 'param':
      case 'glob': {
        const bound = params[value];
        if (bound == null) return '';
        return type === 'glob' ? String(bound) : encodeURIComponent(String(bound));
      }
      case 'optional': {
        const complete = value.every((child) => !Array.isArray(child) || child[0] !== 'param' || params[child[1]] != null);
        return complete ? value.map((child) => this.evaluate(child, params)).join('') : '';
      }
      default:
        return '';
    }
  }

  buildQueryString(paramDefs, options) {
    const pairs = [];
    Object.keys(options).forEach((key) => {
      if (paramDefs[key] !== undefined || RESERVED_OPTIONS.includes(key)) return;
      const value = options[key];
      const values = Array.isArray(value) ? value : [value];
      values.forEach((item) => {
        if (item != null) pairs.push(encodeURIComponent(key) + '=' + encodeURIComponent(String(item)));
      });
    });
    return pairs.join('&');
  }

  origin(options) {
    const urlOptions = Object.assign({}, this.defaultUrlOptions, pick(options, ['scheme', 'host', 'port']));
    const scheme = urlOptions.scheme || 'http';
    const host = urlOptions.host || 'localhost';
    const port = urlOptions.port;
    const defaultPort = (scheme === 'http' && Number(port) === 80) || (scheme === 'https' && Number(port) === 443);
    return `${scheme}://${host}` + (port && !defaultPort ? `:${port}` : '');
  }

  specToString(spec) {
    return spec.map((node) => {
      if (typeof node === 'string') return node;
      const [type, value] = node;
      if (type === 'param') return `:${value}`;
      if (type === 'glob') return `*${value}`;
      if (type === 'optional') return `(${this.specToString(value)})`;
      return '';
    }).join('');
  }
}

const RESERVED_OPTIONS = ['anchor', 'trailing_slash', 'scheme', 'host', 'port'];

function isPlainObject(value) {
  return typeof value === 'object' && value !== null && !Array.isArray(value) &&
    Object.getPrototypeOf(value) === Object.prototype && !('id' in value && Object.keys(value).length === 1);
}

function toParam(value) {
  if (typeof value === 'object' && value !== null && 'id' in value) return value.id;
  return value;
}

function pick(source, keys) {
  const result = {};
  keys.forEach((key) => {
    if (source[key] !== undefined) result[key] = source[key];
  });
  return result;
}"""

CONFIGURE_JS = r"""/**
 * Update runtime options (defaultUrlOptions, trailingSlash).
 */
function configure(options) {
  _builder.configure(options);
}"""

RICH_HELPERS_JS = r"""/**
 * Encode a query object; array values repeat the key.
 */
function _buildQueryString(query) {
  const parts = [];
  for (const [key, value] of Object.entries(query)) {
    const values = Array.isArray(value) ? value : [value];
    for (const item of values) {
      if (item !== null && item !== undefined) {
        parts.push(encodeURIComponent(key) + '=' + encodeURIComponent(String(item)));
      }
    }
  }
  return parts.join('&');
}

/**
 * Build a URL by substituting params into a route pattern.
 * Optional groups such as (.:format) are kept only when their params are given;
 * optional params are read from `params` first, then from `options`.
 */
function _buildUrl(pattern, params = {}, options = {}) {
  params = params || {};
  options = options || {};

  // Replace :param placeholders (and *glob placeholders, unencoded)
  let url = pattern.replace(/([:*])(\w+)/g, (match, kind, name) => {
    let value = params[name] != null ? params[name] : options[name];
    if (value == null) return match;
    if (typeof value === 'object' && 'id' in value) value = value.id;
    return kind === '*' ? String(value) : encodeURIComponent(String(value));
  });

  let previous;
  do {
    previous = url;
    url = url.replace(/\(([^()]*)\)/g, (match, inner) => (/[:*]\w/.test(inner) ? '' : inner));
  } while (url !== previous);

  const missing = url.match(/[:*]\w+/g);
  if (missing) {
    throw new Error('Missing required parameter(s): ' + missing.map((token) => token.slice(1)).join(', '));
  }

  // Handle query parameters
  if (options.query) {
    const queryString = _buildQueryString(options.query);
    if (queryString) url += (url.includes('?') ? '&' : '?') + queryString;
  } else if (options.mergeQuery && typeof window !== 'undefined') {
    const current = new URLSearchParams(window.location.search);
    for (const [key, value] of Object.entries(options.mergeQuery)) {
      current.delete(key);
      const values = Array.isArray(value) ? value : [value];
      for (const item of values) {
        if (item !== null && item !== undefined) current.append(key, String(item));
      }
    }
    const queryString = current.toString();
    if (queryString) url += (url.includes('?') ? '&' : '?') + queryString;
  }

  // Handle anchor
  if (options.anchor) url += '#' + options.anchor;

  return url;
}"""

FORM_HELPER_JS = r"""/**
 * Build a form action URL.
 * Method spoofing for non-GET/POST methods: HTML forms can only submit GET or
 * POST, so other verbs are sent as POST with _method=VERB in the query string.
 */
function _buildFormAction(pattern, params = {}, method = 'post', options = {}) {
  const verb = String(method).toLowerCase();
  if (verb === 'get' || verb === 'post') {
    return _buildUrl(pattern, params, options);
  }
  const query = Object.assign({}, options && options.query, { _method: verb.toUpperCase() });
  return _buildUrl(pattern, params, Object.assign({}, options, { query }));
}"""


_WAYFINDER_HEADER = r"""/**
 * Route runtime for per-resource route modules.
 * Generated by routes-js. Do not edit manually.
 */

export type Method = 'get' | 'post' | 'put' | 'patch' | 'delete' | 'head' | 'options';

export interface Route<M extends Method = Method> {
  readonly url: string;
  readonly method: M;
}

export interface RouteOptions {
  query?: Record<string, string | number | boolean | null | undefined | Array<string | number>>;
  anchor?: string;
}

export interface FormAttrs {
  readonly action: string;
  readonly method: 'get' | 'post';
}

/** A route parameter: a plain value or a record exposing `id`. */
export type Param = string | number | { id: string | number };

type Args<P> = P | Param | undefined;
type Builder<P, R> = (params?: Args<P>, options?: RouteOptions) => R;
"""

_ROUTE_FUNCTION_TYPE = r"""
export type RouteFunction<P, M extends Method> = Builder<P, Route<M>> & {
  url: Builder<P, string>;
  get: Builder<P, Route<'get'>>;
  post: Builder<P, Route<'post'>>;
  patch: Builder<P, Route<'patch'>>;
  put: Builder<P, Route<'put'>>;
  delete: Builder<P, Route<'delete'>>;
  head: Builder<P, Route<'head'>>;
{form_member}  readonly pattern: string;
  readonly defaultMethod: M;
};
"""

_FORM_FUNCTION_TYPE = r"""
export type FormFunction<P> = Builder<P, FormAttrs> & {
  patch: Builder<P, FormAttrs>;
  put: Builder<P, FormAttrs>;
  delete: Builder<P, FormAttrs>;
};
"""

_ROUTE_FACTORY = r"""
export function route<P extends Record<string, Param | undefined> = Record<string, never>, M extends Method = Method>(
  pattern: string,
  defaultMethod: M,
): RouteFunction<P, M> {
  const buildUrl = (params?: Args<P>, options?: RouteOptions): string => {
    const values = normalizeParams(pattern, params);
    let url = pattern.replace(/([:*])(\w+)/g, (match: string, kind: string, name: string) => {
      const value = values[name];
      if (value == null) return match;
      return kind === '*' ? String(value) : encodeURIComponent(String(value));
    });
    url = dropOptionalGroups(url);

    const missing = url.match(/[:*]\w+/g);
    if (missing) {
      throw new Error(`Missing required parameter(s): ${missing.map((token) => token.slice(1)).join(', ')}`);
    }

    if (options?.query) {
      const search = new URLSearchParams();
      for (const [key, value] of Object.entries(options.query)) {
        if (value == null) continue;
        if (Array.isArray(value)) {
          value.forEach((item) => search.append(key, String(item)));
        } else {
          search.set(key, String(value));
        }
      }
      const qs = search.toString();
      if (qs) url += '?' + qs;
    }
    if (options?.anchor) url += '#' + options.anchor;
    return url;
  };

  const withMethod = <V extends Method>(method: V): Builder<P, Route<V>> =>
    (params, options) => ({ url: buildUrl(params, options), method });
{form_builder}
  return Object.assign(withMethod(defaultMethod), {
    url: buildUrl,
    get: withMethod('get'),
    post: withMethod('post'),
    patch: withMethod('patch'),
    put: withMethod('put'),
    delete: withMethod('delete'),
    head: withMethod('head'),
{form_property}    pattern,
    defaultMethod,
  });
}
"""

_FORM_BUILDER = r"""
  // Method spoofing: forms only submit GET/POST, other verbs travel as _method=VERB
  const buildForm = (method: Method): Builder<P, FormAttrs> => (params, options) => {
    const spoof = method !== 'get' && method !== 'post';
    const query = spoof ? { ...options?.query, _method: method.toUpperCase() } : options?.query;
    return {
      action: buildUrl(params, { ...options, query }),
      method: spoof ? 'post' : (method as 'get' | 'post'),
    };
  };
"""

_FORM_PROPERTY = r"""    form: Object.assign(buildForm(defaultMethod), {
      patch: buildForm('patch'),
      put: buildForm('put'),
      delete: buildForm('delete'),
    }),
"""

_WAYFINDER_UTILS = r"""
function paramNames(pattern: string): string[] {
  return (pattern.match(/[:*]\w+/g) ?? []).map((token) => token.slice(1));
}

function toValue(value: unknown): unknown {
  if (typeof value === 'object' && value !== null && 'id' in value) {
    return (value as { id: unknown }).id;
  }
  return value;
}

// Accepts a params object, a bare value, or a record with `id`
// standing in for the first param.
function normalizeParams(pattern: string, params: unknown): Record<string, unknown> {
  const names = paramNames(pattern);
  if (params == null || names.length === 0) return {};
  if (typeof params !== 'object') return { [names[0]]: params };

  const obj = params as Record<string, unknown>;
  const result: Record<string, unknown> = {};
  for (const name of names) {
    if (name in obj) result[name] = toValue(obj[name]);
  }
  if (Object.keys(result).length === 0 && 'id' in obj) {
    result[names[0]] = obj.id;
  }
  return result;
}

function dropOptionalGroups(url: string): string {
  let previous: string;
  do {
    previous = url;
    url = url.replace(/\(([^()]*)\)/g, (_match: string, inner: string) => (/[:*]\w/.test(inner) ? '' : inner));
  } while (url !== previous);
  return url;
}
"""


def wayfinder_runtime(with_forms: bool = False) -> str:
    """TypeScript source of lib/wayfinder.ts."""
    # the sources are full of JS braces, so placeholders are substituted by name
    parts = [
        _WAYFINDER_HEADER,
        _ROUTE_FUNCTION_TYPE.replace("{form_member}", "  form: FormFunction<P>;\n" if with_forms else ""),
    ]
    if with_forms:
        parts.append(_FORM_FUNCTION_TYPE)
    parts.append(
        _ROUTE_FACTORY
        .replace("{form_builder}", _FORM_BUILDER if with_forms else "")
        .replace("{form_property}", _FORM_PROPERTY if with_forms else "")
    )
    parts.append(_WAYFINDER_UTILS)
    return "".join(parts).strip() + "\n"

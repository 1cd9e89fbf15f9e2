"""
JavaScript runtime installed into every sandbox interpreter.

It provides a minimal, static React: ``createElement`` builds plain element
objects, hooks return their initial values, and ``renderToTree`` resolves
function and class components down to JSON-safe host elements. Event handlers
and other function-valued props are dropped from the tree.

Everything lives under one global so the component scope can shadow it.
"""

RUNTIME_GLOBAL = "__livepreview"

# Names the component body can see, in parameter order.
BINDING_NAMES = ("React", "useState", "exports", "module")

# Interpreter globals hidden from the component body.
SHADOWED_NAMES = ("dukpy", "call_python", "require", "Duktape", RUNTIME_GLOBAL)

MAX_RENDER_DEPTH = 200

RUNTIME_JS = """
var %(global)s = (function () {
  var FRAGMENT = "#fragment";
  var toString = Object.prototype.toString;
  var hasOwn = Object.prototype.hasOwnProperty;

  function isArray(value) {
    return toString.call(value) === "[object Array]";
  }

  function flatten(items, out) {
    for (var i = 0; i < items.length; i++) {
      if (isArray(items[i])) {
        flatten(items[i], out);
      } else {
        out.push(items[i]);
      }
    }
    return out;
  }

  function noop() {}

  function Component(props) {
    this.props = props;
    this.state = {};
  }
  Component.prototype.isReactComponent = {};
  Component.prototype.setState = noop;
  Component.prototype.forceUpdate = noop;

  var React = {
    Fragment: FRAGMENT,
    Component: Component,
    PureComponent: Component,
    createElement: function (type, props) {
      return {
        $$element: true,
        type: type,
        props: props || {},
        children: flatten(Array.prototype.slice.call(arguments, 2), [])
      };
    },
    useState: function (initial) {
      var value = typeof initial === "function" ? initial() : initial;
      return [value, noop];
    },
    useReducer: function (reducer, initial) {
      return [initial, noop];
    },
    useEffect: noop,
    useLayoutEffect: noop,
    useRef: function (initial) {
      return { current: initial };
    },
    useMemo: function (factory) {
      return factory();
    },
    useCallback: function (callback) {
      return callback;
    }
  };

  function describe(value) {
    if (value === null) return "null";
    if (isArray(value)) return "an array";
    return typeof value === "object" ? "an object" : typeof value;
  }

  function componentProps(element) {
    var props = {};
    for (var key in element.props) {
      if (hasOwn.call(element.props, key)) props[key] = element.props[key];
    }
    if (element.children.length === 1) {
      props.children = element.children[0];
    } else if (element.children.length > 1) {
      props.children = element.children;
    }
    return props;
  }

  function hostProps(element) {
    var attrs = {};
    for (var key in element.props) {
      if (!hasOwn.call(element.props, key)) continue;
      if (key === "children" || key === "key" || key === "ref") continue;
      var value = element.props[key];
      if (value === undefined || typeof value === "function") continue;
      attrs[key] = value;
    }
    return attrs;
  }

  function render(node, depth) {
    if (depth > %(max_depth)d) {
      throw new RangeError("Component tree is too deep");
    }
    if (node === null || node === undefined || typeof node === "boolean") {
      return [];
    }
    if (typeof node === "string" || typeof node === "number") {
      return [String(node)];
    }
    if (isArray(node)) {
      var out = [];
      for (var i = 0; i < node.length; i++) {
        out = out.concat(render(node[i], depth + 1));
      }
      return out;
    }
    if (!node.$$element) {
      throw new TypeError("Objects are not valid as a React child (found: " + describe(node) + ")");
    }
    var type = node.type;
    if (typeof type === "function") {
      if (type.prototype && type.prototype.isReactComponent) {
        var instance = new type(componentProps(node));
        return render(instance.render(), depth + 1);
      }
      return render(type(componentProps(node)), depth + 1);
    }
    if (type === FRAGMENT) {
      return render(node.children.length ? node.children : node.props.children, depth + 1);
    }
    if (typeof type !== "string") {
      throw new TypeError("Element type is invalid: expected a string or a component but got " + describe(type));
    }
    var children = node.children.length ? node.children : node.props.children;
    return [{ type: type, props: hostProps(node), children: render(children, depth + 1) }];
  }

  return {
    React: React,
    describe: describe,
    renderToTree: function (element) {
      return render(element, 0);
    }
  };
})();
""" % {"global": RUNTIME_GLOBAL, "max_depth": MAX_RENDER_DEPTH}


# Runs the compiled source as the body of a function whose parameters are the
# binding table followed by the shadowed names, then extracts module.exports.
SCOPE_JS = """
(function (runtime, params, source, props) {
  var module = { exports: {} };
  var exportsTarget = module.exports;
  var scope = Function.apply(null, params.concat([source]));
  scope.call(undefined, runtime.React, runtime.React.useState, exportsTarget, module);

  var Component = module.exports;
  if (typeof Component !== "function") {
    if (Component === exportsTarget && exportsTarget && hasDefault(exportsTarget)) {
      throw new TypeError("export default is not supported; assign the component with module.exports = Component");
    }
    if (Component === exportsTarget) {
      throw new TypeError("module.exports was never assigned; end the code with module.exports = Component");
    }
    throw new TypeError("module.exports must be a component function, got " + runtime.describe(Component));
  }
  return runtime.renderToTree(runtime.React.createElement(Component, props));

  function hasDefault(target) {
    return Object.prototype.hasOwnProperty.call(target, "default");
  }
})(%(global)s, dukpy['params'], dukpy['source'], dukpy['props']);
""" % {"global": RUNTIME_GLOBAL}

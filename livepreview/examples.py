"""
Sample components and the built-in prompt suggestions.
"""

EXAMPLES = {
    "simple": """function SimpleComponent() {
  return (
    <div className="p-4 bg-green-100 rounded">
      <h3 className="text-lg font-bold">Hello World</h3>
      <p>This is a simple component.</p>
    </div>
  );
}

module.exports = SimpleComponent;
""",
    "complex": """function ComplexComponent() {
  const [count, setCount] = React.useState(0);
  const buttonClassName = "mt-2 p-2 text-white rounded";

  return (
    <div className="p-4 bg-blue-100 rounded">
      <h3 className="text-lg font-semibold">Counter Component</h3>
      <p>Current Count: {count}</p>
      <button onClick={() => setCount(count + 1)} className={`${buttonClassName} bg-blue-500 hover:bg-blue-600`}>
        Increment
      </button>
      <button onClick={() => setCount(0)} className={`${buttonClassName} ml-2 bg-red-500 hover:bg-red-600`}>
        Reset
      </button>
    </div>
  );
}

module.exports = ComplexComponent;
""",
}

COMMON_PROMPTS = [
    "Add a button",
    "Change color scheme",
    "Optimize performance",
]

"""Hello World -- the simplest wafview example.

Compile a template from a string and render it with view data.
No views directory needed.

Run:
    python app.py
"""

from wafview import Environment

env = Environment()

# Compile from string
template = env.from_string("Hello, {{ name }}!")

# Render with view data
output = template.render(name="World")

# {{ }} escapes, {!! !!} does not
escaped = env.render_string("{{ html }} vs {!! html !!}", html="<b>hi</b>")


def main() -> None:
    print(output)
    print(escaped)
    print()

    # Multiple renders with different data
    for name in ["Ada", "Grace", "Linus"]:
        print(template.render(name=name))


if __name__ == "__main__":
    main()

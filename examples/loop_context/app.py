"""Loop context -- loop.first, loop.last, loop.iteration, loop.count.

Demonstrates the ``loop`` variable in @foreach blocks for styling
first/last rows, row numbers and nested loops. Views come from a
DictLoader, so no views directory is needed.

Run:
    python app.py
"""

from wafview import DictLoader, Environment

env = Environment(
    loader=DictLoader(
        {
            "table": (
                "<table>\n"
                "@foreach(items as item)\n"
                '  <tr class="{{ loop.cycle(\'odd\', \'even\') }}'
                "{{ ' first' if loop.first else '' }}{{ ' last' if loop.last else '' }}\">"
                "<td>{{ loop.iteration }}/{{ loop.count }}</td><td>{{ item }}</td></tr>\n"
                "@endforeach\n"
                "</table>"
            ),
            "outline": (
                "@foreach(chapters as chapter, pages)<ol>"
                "@foreach(pages as page)"
                "<li>{{ loop.parent.iteration }}.{{ loop.iteration }} {{ chapter }}: {{ page }}</li>"
                "@endforeach</ol>"
                "@endforeach"
            ),
        }
    )
)

items = ["Alpha", "Beta", "Gamma", "Delta"]
output = env.render("table", items=items)

outline = env.render(
    "outline",
    chapters=[("Intro", ["Why", "How"]), ("Usage", ["Install"])],
)


def main() -> None:
    print(output)
    print()
    print(outline)


if __name__ == "__main__":
    main()

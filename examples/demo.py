import sys
import os

# Ensure quizflow is in path
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from quizflow import (
    QUIZ_COMPLETE, ConnectionRejected, FlowEditor, GraphStore, JsonSerializer,
    MermaidExporter, QuizRunner, Trigger,
)


PAGES = [
    {"id": "intro", "title": "Intro", "elements": [{"id": "go", "type": "continue_button"}]},
    {
        "id": "budget",
        "title": "Budget",
        "elements": [{"id": "range", "type": "multiple_choice", "options": ["Small", "Large"]}],
    },
    {"id": "starter", "title": "Starter plan", "elements": []},
    {"id": "sales", "title": "Talk to sales", "elements": []},
    {"id": "done", "title": "Thanks", "elements": []},
]


def main():
    print("Authoring navigation graph...")
    pages = JsonSerializer.pages_from_list(PAGES)
    store = GraphStore()
    store.subscribe(lambda graph: print(f"  graph now has {len(graph.connections)} connection(s)"))

    editor = FlowEditor(store, pages)
    editor.set_enabled(True)

    editor.connect("node_budget", "node_starter", element_id="range", option_index=0)
    editor.connect("node_budget", "node_sales", element_id="range", option_index=1)
    editor.connect("node_starter", "node_done")

    try:
        editor.connect("node_budget", "node_done")
    except ConnectionRejected as e:
        print(f"  rejected: {e}")

    print("\nMermaid:")
    print(MermaidExporter.to_mermaid(editor.graph))

    print("\nRunning quiz...")
    runner = QuizRunner(editor.graph, pages)
    runner.start()
    runner.answer(Trigger("go", "continue_button"))
    runner.answer(Trigger("range", "multiple_choice", "Large", 1))
    while runner.current_page_id != QUIZ_COMPLETE:
        runner.answer()

    print(" -> ".join(runner.history))


if __name__ == "__main__":
    main()

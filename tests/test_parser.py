from promptlab.services.react_agent.parser import ParseDefaults, ParseOutcome, parse_step

# ---------------------------------------------------------------------------
# Well-formed output
# ---------------------------------------------------------------------------

def test_parse_well_formed_step():
    text = """Thought: I should look up the Colorado orogeny.
Action: search
Action Input: Colorado orogeny"""
    parsed = parse_step(text)
    assert parsed.thought == "I should look up the Colorado orogeny."
    assert parsed.action == "search"
    assert parsed.action_input == "Colorado orogeny"
    assert parsed.outcome == ParseOutcome.PARSED
    assert parsed.defaulted == frozenset()


def test_parse_is_idempotent():
    text = "Thought: done\nAction: finish\nAction Input: 42"
    assert parse_step(text) == parse_step(text)


def test_parse_finish_keeps_answer_verbatim():
    parsed = parse_step("Thought: I know it.\nAction: finish\nAction Input: 1,800 to 7,000 ft")
    assert parsed.action == "finish"
    assert parsed.action_input == "1,800 to 7,000 ft"


def test_parse_multiline_thought_and_input():
    text = """Thought: First line of reasoning.
Second line of reasoning.
Action: lookup
Action Input: eastern sector
and more context"""
    parsed = parse_step(text)
    assert parsed.thought == "First line of reasoning.\nSecond line of reasoning."
    assert parsed.action_input == "eastern sector\nand more context"


def test_parse_tolerates_preamble_and_case():
    text = """Sure, here is my next step.

THOUGHT: compute it
action: Calculator
ACTION INPUT: 2 + 2"""
    parsed = parse_step(text)
    assert parsed.thought == "compute it"
    assert parsed.action == "calculator"
    assert parsed.action_input == "2 + 2"


def test_parse_markdown_bold_labels():
    text = "**Thought:** I should search.\n**Action:** search\n**Action Input:** High Plains"
    parsed = parse_step(text)
    assert parsed.thought == "I should search."
    assert parsed.action == "search"
    assert parsed.action_input == "High Plains"


def test_parse_numbered_labels():
    text = "Thought 3: check the document\nAction 3: lookup\nAction Input 3: elevation"
    parsed = parse_step(text)
    assert parsed.thought == "check the document"
    assert parsed.action == "lookup"
    assert parsed.action_input == "elevation"


def test_parse_stops_at_hallucinated_observation():
    text = "Thought: t\nAction: search\nAction Input: x\nObservation: made up result"
    parsed = parse_step(text)
    assert parsed.action_input == "x"


def test_parse_strips_quotes_around_input():
    parsed = parse_step('Thought: t\nAction: `search`\nAction Input: "Harry Styles age"')
    assert parsed.action == "search"
    assert parsed.action_input == "Harry Styles age"


def test_parse_strips_brackets_around_finish():
    parsed = parse_step("Thought: I know it\nAction: [finish]\nAction Input: 42")
    assert parsed.action == "finish"
    assert parsed.action_input == "42"
    assert parsed.outcome == ParseOutcome.PARSED


def test_parse_strips_brackets_around_tool_name():
    parsed = parse_step("Thought: look it up\nAction: [Search]\nAction Input: Harry Styles age")
    assert parsed.action == "search"
    assert parsed.action_input == "Harry Styles age"


def test_parse_usage_syntax_without_input_label():
    parsed = parse_step("Thought: do the math\nAction: calculator[sqrt(16) + 5]")
    assert parsed.action == "calculator"
    assert parsed.action_input == "sqrt(16) + 5"
    assert parsed.outcome == ParseOutcome.PARSED


def test_parse_input_label_wins_over_usage_syntax():
    parsed = parse_step("Thought: t\nAction: finish[draft]\nAction Input: final")
    assert parsed.action == "finish"
    assert parsed.action_input == "final"


# ---------------------------------------------------------------------------
# Malformed output falls back to defaults
# ---------------------------------------------------------------------------

def test_missing_action_input_defaults_to_empty():
    parsed = parse_step("Thought: I will search.\nAction: search")
    assert parsed.action == "search"
    assert parsed.action_input == ""
    assert parsed.outcome == ParseOutcome.DEFAULTED
    assert parsed.defaulted == frozenset({"action_input"})


def test_unstructured_text_uses_all_defaults():
    parsed = parse_step("I am not following the format at all.")
    defaults = ParseDefaults()
    assert parsed.thought == defaults.thought
    assert parsed.action == defaults.action
    assert parsed.action_input == defaults.action_input
    assert parsed.defaulted == frozenset({"thought", "action", "action_input"})


def test_empty_and_none_text_never_raise():
    for text in ("", None, "   \n  "):
        parsed = parse_step(text)
        assert parsed.outcome == ParseOutcome.DEFAULTED
        assert parsed.action == "search"


def test_empty_action_label_uses_default_action():
    parsed = parse_step("Thought: hmm\nAction:\nAction Input: something")
    assert parsed.action == "search"
    assert parsed.action_input == "something"
    assert "action" in parsed.defaulted


def test_custom_defaults():
    defaults = ParseDefaults(thought="keep going", action="lookup", action_input="?")
    parsed = parse_step("garbage", defaults)
    assert parsed.thought == "keep going"
    assert parsed.action == "lookup"
    assert parsed.action_input == "?"

"""
Coaching Prompt - instructions and data message for the AI aim coach.

The system prompt fixes the structure of the answer; the user prompt carries
the player's setup, the aggregate stats of the current filter and the most
recent entries, one per line.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from aimtracker.models import BenchmarkEntry
from aimtracker.stats import CurrentStats

MAX_ENTRIES_FOR_AI = 100

NO_DATA_LINE = "No recent benchmark data available for this filter."


SYSTEM_PROMPT = """You are an expert FPS aim coach analyzing aim trainer benchmark data. Your goal is to provide insightful, actionable feedback based ONLY on the provided data.

Format your response using Markdown:
- Don't assume all scenarios are the same. There are different categories of scenarios (flicking, tracking, target switching, etc.) and different training focuses (speed, precision, consistency, etc.). Each scenario has different characteristics and different weaknesses.
- Each scenario requires a different technique and different training methods.
- Don't assume the user is using the same technique for all scenarios.
- Use headings (e.g. Analysis) for each section.
- Use bullet points for explanations. Separate sections with a blank line (double newline) in the Markdown source.
- Use bullet points for suggestions or specific observations.
- Don't include conclusions or generic advice.

Follow this structure:

Analysis: (2-3 sentences)

- Analyze only the weaknesses of the user based on the provided recent benchmark list and find the biggest area for improvement.
- Analyze the Score/Accuracy relationship: interpret what the average score and accuracy imply (e.g. fast but imprecise, slow but precise, good balance).
- Base these points strictly on the provided recent benchmark list.
- Look at the `Recent Benchmark Scores` list and comment on patterns in specific scenarios.
- Don't include conclusions or generic advice.
(separate this line) " ------------------------- "
Game-based Suggestions: (1-2 sentences)
- Briefly suggest how the observed patterns might translate to performance (focus on weaknesses) in the specified game.
- Focus on the biggest area for improvement (e.g. speed, precision under pressure, consistency).
- Provide 1-2 specific, constructive suggestions for in-game improvement as bullet points.
- Don't include conclusions or generic advice.
(separate this line) " ------------------------- "
Overall Recommendations and Tips: (1-2 sentences)
- Provide 1-2 specific, constructive suggestions (focus on weaknesses) for improvement as bullet points.
- Say whether to prioritize speed, precision, consistency or another aspect based on the analysis.
- Suggest specific scenarios to focus on based on the analysis.
- Provide 1-2 specific suggestions (training methods, areas of focus, etc.) as bullet points.
- Don't include conclusions or generic advice.
(separate this line) " ------------------------- "
Training Plan (next 7 days)
- Primary drill: <scenario> - focus on <speed/precision/consistency>.
- Secondary drill: <scenario> - ...
- Micro-habit: <10 words or fewer>.
(separate this line) " ------------------------- "
Don't include generic advice or commendations; focus on the weaknesses and provide suggestions for improvement.
Keep the feedback concise, encouraging, and easy to understand. Address the user directly."""


def format_number(value: float) -> str:
    """Thousands separators, at most three decimals, trailing zeros dropped."""
    quantized = Decimal(value).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    if quantized == quantized.to_integral_value():
        return f"{int(quantized):,}"
    text = f"{quantized:,.3f}".rstrip("0").rstrip(".")
    return text


def plain_number(value: float) -> str:
    """Shortest display form: 80.0 -> '80', 80.5 -> '80.5'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_entry_line(entry: BenchmarkEntry) -> str:
    line = (
        f"- {entry.date} | {entry.scenario} | Score: {format_number(entry.score)} | "
        f"Acc: {plain_number(entry.accuracy)}% | Diff: {entry.difficulty.value}"
    )
    if entry.notes:
        line += f' | Notes: "{entry.notes}"'
    return line


def build_user_prompt(
    user_game: str,
    user_sensitivity: str,
    filter_scenario: str,
    current_stats: CurrentStats,
    recent_entries: Sequence[BenchmarkEntry],
) -> str:
    scope = filter_scenario or "All Scenarios"
    recent = list(recent_entries)[:MAX_ENTRIES_FOR_AI]
    recent_block = "\n".join(format_entry_line(e) for e in recent) if recent else NO_DATA_LINE

    return f"""
Analyze my recent aim training performance:

Game I'm training for: {user_game}
My Sensitivity: {user_sensitivity}
Current Scenario Filter: {scope}

Overall Stats ({scope}):
- Average Score: {format_number(current_stats.avg_score)}
- Average Accuracy: {plain_number(current_stats.avg_accuracy)}%
- Best Score: {format_number(current_stats.best_score)}
- Total Entries Analyzed (within filter): {current_stats.count}

Recent Benchmark Scores (up to {MAX_ENTRIES_FOR_AI} most recent within filter):
{recent_block}

Please provide coaching feedback based on this data, following the structured approach outlined.
"""


def build_full_prompt(user_prompt: str) -> str:
    """System and user prompt combined, for pasting into another chat tool."""
    return f"--- SYSTEM PROMPT ---\n\n{SYSTEM_PROMPT}\n\n--- USER PROMPT ---\n{user_prompt}"

"""Minimal example: analyze a draft locally, then ask an LLM provider for scores."""

from __future__ import annotations

import json
import sys

from prose_lens import analyze_text, build_evaluator, difficulty_note, load_config


def main() -> None:
    config = load_config(sys.argv[1] if len(sys.argv) > 1 else None)

    sample_text = (
        "I think the new onboarding flow is really quite confusing. "
        "The settings page was redesigned by the team, but it is probably "
        "still a bit hard to find the export button.\n\n"
        "Users quickly give up."
    )
    analysis = analyze_text(sample_text)
    print("Difficulty:", difficulty_note(analysis.flesch_score))
    print(json.dumps(analysis.to_dict(), indent=2))

    evaluator = build_evaluator(config.evaluation)
    evaluation = evaluator.evaluate(sample_text)
    print(json.dumps(evaluation.to_dict(), indent=2))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Quiz Solving Example
====================

Opens a quiz page in Chrome, shows what QuizPilot finds on it and then
answers it, either with answers given on the command line or by asking
a hosted language model (needs OPENAI_API_KEY or ANTHROPIC_API_KEY).

Usage:
    python examples/solve_quiz.py https://example.com/quiz Paris 4
    python examples/solve_quiz.py https://example.com/quiz
"""

import sys

from quizpilot import AgentConfig, PageAgent


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    url, answers = sys.argv[1], sys.argv[2:]
    config = AgentConfig(headless=False, report_dir="./quizpilot_reports")

    with PageAgent.launch(url, config) as agent:
        analysis = agent.handle({"action": "analyzeQuiz"})
        for i, item in enumerate(analysis.get("quizData", []), 1):
            print(f"Q{i}: {item['question']}")
            for option in item["options"]:
                print(f"    - {option}")
        print()

        if answers:
            result = agent.handle({"action": "solveQuiz", "answers": answers})
        else:
            result = agent.handle({"action": "autoSolveQuiz"})

        if result.get("success"):
            print(f"Answered {result['questionsAnswered']} question(s)")
        else:
            print(f"Failed: {result.get('error')}")

    print(f"Flight record: {agent.report_path}")


if __name__ == "__main__":
    main()

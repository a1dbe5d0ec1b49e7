"""Run examples: python -m insurance_analytics.examples.<name>

Available examples:
    demo_reports - Run the full report catalog over the bundled sample snapshot

Usage:
    python -m insurance_analytics.examples                 # Show this help
    python -m insurance_analytics.examples.demo_reports    # Run a specific example
"""


def main():
    """Print usage information for the examples subpackage."""
    print(__doc__)
    examples = [
        "demo_reports",
    ]
    print("To run an example:")
    for name in examples:
        print(f"    python -m insurance_analytics.examples.{name}")


if __name__ == "__main__":
    main()

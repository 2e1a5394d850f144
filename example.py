#!/usr/bin/env python3
"""
Example usage of the context-packer package.
"""

from context_packer import ContextOptimizer, MessageFormatter, OptimizerConfig, Pricing, TokenizerService


def keyword_overlap(item, query):
    """Score an item by the share of query words it mentions."""
    query_words = set(query.lower().split())
    item_words = set(item.content.lower().split())
    return 1000.0 * len(query_words & item_words) / max(1, len(query_words))


def main():
    """Demonstrate context-packer functionality."""

    print("=== context-packer Example ===\n")

    config = OptimizerConfig(
        model="gpt-4o",
        context_window=1200,
        reserve_output=700,
        pricing=Pricing(input_per_1m=2.5, provider="openai"),
    )
    optimizer = ContextOptimizer(config, TokenizerService(backend="heuristic"))

    optimizer.add("system", "You are a helpful AI assistant specialized in weather analysis.",
                  priority="required", position="beginning")
    optimizer.add("tools", [
        {"name": "get_conditions", "description": "Current conditions for a location"},
        {"name": "get_forecast", "description": "Five-day forecast for a location"},
    ], priority="high", requires={"tools_get_forecast": "examples_forecast_demo"})
    optimizer.add("examples", [
        {"name": "forecast_demo", "description": "Q: Weather tomorrow? A: call get_forecast(location)"},
    ], priority="low")
    optimizer.add("history", [
        {"role": "user", "content": "What is the temperature trend this week?"},
        {"role": "assistant", "content": "Temperatures are falling slowly."},
        {"role": "user", "content": "Will it rain in San Francisco?"},
        {"role": "assistant", "content": "A low pressure system is moving in from the west."},
    ], priority="high", group_by="turn", keep_last=1, drop_strategy="oldest", position="end")
    optimizer.add("rag", [
        "Recent weather data shows a low pressure system bringing rain to San Francisco.",
        "Historical averages for October are mild with little rain.",
        "Coastal fog is common in the mornings during autumn.",
    ], priority="medium", scorer=keyword_overlap)

    result = optimizer.pack("Will it rain in San Francisco tomorrow?")

    print("1. Packed items")
    print("-" * 30)
    for item in result.items:
        print(f"  [{item.placement:<9}] {item.id:<24} {item.tokens:>4} tokens  score={item.score:.1f}")
    print()

    print("2. Stats")
    print("-" * 30)
    stats = result.stats
    print(f"  Budget:      {stats.budget} tokens")
    print(f"  Used:        {stats.total_tokens} tokens ({stats.utilization:.1%})")
    if stats.estimated_cost:
        print(f"  Est. cost:   {stats.estimated_cost.input} ({stats.estimated_cost.provider})")
    for source, info in stats.breakdown.items():
        line = f"  {source}: {info.tokens} tokens, {info.items} item(s)"
        if info.dropped:
            line += f", {info.dropped} dropped ({info.reason})"
        print(line)
    print()

    print("3. Dropped and warnings")
    print("-" * 30)
    for dropped in result.dropped:
        print(f"  {dropped.id}: {dropped.reason}")
    for warning in result.warnings:
        print(f"  [{warning.type}] {warning.message}")
    print()

    print("4. Chat messages")
    print("-" * 30)
    for message in MessageFormatter().to_messages(result):
        print(f"  {message['role']}: {message['content'][:60]}")


if __name__ == "__main__":
    main()

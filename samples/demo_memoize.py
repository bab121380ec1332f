"""
Expiring Memoization Demo

Wraps a deliberately slow "weather lookup" with make_memoized and shows
a cache miss, a cache hit, expiry after the TTL and explicit invalidation.
Runs against Valkey by default, or in-process with --in-memory.
"""

import random
import time

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from valkey_memo import InMemoryStore, MemoStats, ValkeyConfig, ValkeyStore, make_memoized
from valkey_memo.utils import configure_logging

app = typer.Typer(help="Expiring Memoization Demonstration")
console = Console()


def print_section(title: str):
    """Print a formatted section header using rich."""
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", box=box.DOUBLE))


def slow_weather_lookup(country: str, city: str) -> dict:
    """Stand-in for an external API call."""
    time.sleep(0.5)
    return {
        "country": country,
        "city": city,
        "temp": round(random.uniform(-5, 35), 1),
        "humidity": random.randint(20, 90),
    }


def timed_call(fn, *args):
    hits_before = fn.stats.hit_count
    start = time.perf_counter()
    result = fn(*args)
    latency = (time.perf_counter() - start) * 1000
    return result, latency, fn.stats.hit_count > hits_before


def print_call(label: str, result: dict, latency: float, hit: bool, stats: MemoStats):
    source = "CACHE_HIT" if hit else "CACHE_MISS"
    source_color = "green" if source == "CACHE_HIT" else "yellow"
    icon = "✓" if source == "CACHE_HIT" else "⚡"
    console.print(f"\n{icon} [bold]{label}[/bold]")
    console.print(
        f"   Source: [{source_color}]{source:12}[/{source_color}] | "
        f"Latency: [magenta]{latency:7.2f} ms[/magenta] | Hits: {stats.hit_count} Misses: {stats.miss_count}"
    )
    console.print(f"   Data: {result}")


@app.command()
def run(
    ttl: int = typer.Option(3, "--ttl", help="TTL in seconds for cached results"),
    prefix: str = typer.Option("demo:weather", "--prefix", help="Cache key prefix"),
    in_memory: bool = typer.Option(False, "--in-memory", help="Use the in-process store instead of Valkey"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show cache keys and debug logging"),
):
    """Run the memoization walkthrough."""
    configure_logging("DEBUG" if verbose else "WARNING")

    if in_memory:
        store = InMemoryStore()
        backend = "in-memory"
    else:
        config = ValkeyConfig.from_env()
        store = ValkeyStore.from_config(config)
        backend = str(config)

    stats = MemoStats()
    weather = make_memoized(prefix, ttl, store, slow_weather_lookup, stats=stats)

    print_section("EXPIRING MEMOIZATION")
    console.print(f"Store: [cyan]{backend}[/cyan]   TTL: [cyan]{ttl}s[/cyan]")
    if verbose:
        console.print(f"[dim]Cache Key:[/dim] [yellow]{weather.cache_key('US', 'Seattle')}[/yellow]")

    result, latency, hit = timed_call(weather, "US", "Seattle")
    print_call("1. First call (CACHE_MISS expected)", result, latency, hit, stats)

    result, latency, hit = timed_call(weather, "US", "Seattle")
    print_call("2. Same arguments (CACHE_HIT expected)", result, latency, hit, stats)

    result, latency, hit = timed_call(weather, "FR", "Paris")
    print_call("3. Different arguments (CACHE_MISS expected)", result, latency, hit, stats)

    console.print(f"\n⏳ Waiting {ttl + 1}s for the TTL to elapse...")
    time.sleep(ttl + 1)
    result, latency, hit = timed_call(weather, "US", "Seattle")
    print_call("4. After expiry (CACHE_MISS expected)", result, latency, hit, stats)

    removed = weather.invalidate("US", "Seattle")
    console.print(f"\n🗑  Invalidated US/Seattle: {removed}")
    result, latency, hit = timed_call(weather, "US", "Seattle")
    print_call("5. After invalidation (CACHE_MISS expected)", result, latency, hit, stats)

    print_section("STATISTICS")
    table = Table(box=box.ROUNDED)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="magenta", justify="right")
    for name, value in stats.to_dict().items():
        table.add_row(name, f"{value:.2f}" if isinstance(value, float) else str(value))
    console.print(table)

    if isinstance(store, ValkeyStore):
        store.close()


if __name__ == "__main__":
    app()

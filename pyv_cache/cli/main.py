from __future__ import annotations
import argparse
import sys
from ..config import SimConfig
from ..runtime.cache import LFUCache, CacheConstructionError
from ..runtime.memory import MainMemory, MemoryAccessError
from ..runtime.trace import load_trace, parse_int, TraceParseError
from ..runtime.simulator import run as run_sim
from ..utils.formatting import print_cache
from ..utils.logging import get_logger, set_level
from ..utils.reporting import generate_report

logger = get_logger(__name__)


def cmd_run(args):
    """Handles the 'run' command."""
    config = SimConfig.from_args(args)
    set_level(config.log_level)

    logger.debug(f"Simulator configuration: {config}")

    if not config.memory_image:
        raise ValueError("No memory image given (use --memory or 'memory_image' in the config file).")
    if not config.trace:
        raise ValueError("No trace given (use --trace or 'trace' in the config file).")

    # 1. Load inputs
    memory = MainMemory.load(config.memory_image)
    trace = load_trace(config.trace)
    logger.info(f"Loaded {memory.size} bytes of memory and {len(trace)} accesses")

    # 2. Build the cache and replay the trace
    cache = LFUCache.from_config(config)
    _, stats = run_sim(cache, memory, trace)

    if args.dump:
        print_cache(cache)

    # 3. Generate all reports
    if not args.no_report:
        generate_report(cache, config, stats)

    print(f"[OK] Simulation finished ({stats['hits']} hits, {stats['misses']} misses)")
    return 0


def _tokens(stream):
    for line in stream:
        yield from line.split()


def cmd_interactive(args):
    """Handles the 'interactive' command: memory, geometry and addresses are read from stdin."""
    tokens = _tokens(sys.stdin)

    print("Size of data: ", end="", flush=True)
    n = parse_int(next(tokens))
    print("Input data >> ", end="", flush=True)
    memory = MainMemory.from_values([parse_int(next(tokens)) for _ in range(n)])

    print("s t b E: ", end="", flush=True)
    s, t, b, e = [parse_int(next(tokens)) for _ in range(4)]
    cache = LFUCache(s, t, b, e)

    # Addresses are read until a negative one (or end of input)
    for token in tokens:
        address = parse_int(token)
        if address < 0:
            break
        cache.read(memory, address)

    print()
    print_cache(cache)
    return 0


def build_parser():
    p = argparse.ArgumentParser(
        prog="pyv-cache",
        description="PyV-Cache: LFU set-associative cache simulator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Run Command ---
    pr = sub.add_parser("run", help="Replay an access trace through the cache",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)

    # Config file
    pr.add_argument("-c", "--config", type=str, default=None,
                    help="Path to YAML config file to override defaults")

    # Inputs (default=None to allow override from YAML)
    pr.add_argument("--memory", type=str, default=None, dest="memory_image",
                    help="Memory image: raw .bin file or whitespace-separated byte values")
    pr.add_argument("--trace", type=str, default=None,
                    help="Access trace file ('r ADDR', 'w ADDR VALUE' or bare ADDR per line)")

    # Geometry
    geo_group = pr.add_argument_group('Cache Geometry Arguments')
    geo_group.add_argument("-s", "--index-bits", type=int, default=None, dest="index_bits",
                           help="Number of set index bits (2^s sets)")
    geo_group.add_argument("-t", "--tag-bits", type=int, default=None, dest="tag_bits",
                           help="Number of tag bits (tag display width)")
    geo_group.add_argument("-b", "--offset-bits", type=int, default=None, dest="offset_bits",
                           help="Number of block offset bits (2^b byte blocks)")
    geo_group.add_argument("-E", "--associativity", type=int, default=None, dest="associativity",
                           help="Number of lines per set")

    # Output
    pr.add_argument("--report", type=str, default=None, dest="report_dir",
                    help="Directory to save simulation reports")
    pr.add_argument("--no-report", action="store_true",
                    help="Skip writing report files")
    pr.add_argument("--dump", action="store_true",
                    help="Print the contents of every cache line after the run")
    pr.add_argument("--log-level", type=str, default=None, dest="log_level",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                    help="Logging level")

    pr.set_defaults(func=cmd_run)

    # --- Interactive Command ---
    pi = sub.add_parser("interactive", help="Read memory, geometry and addresses from stdin")
    pi.set_defaults(func=cmd_interactive)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except CacheConstructionError as e:
        logger.error(f"Cache construction failed: {e}")
    except (MemoryAccessError, TraceParseError) as e:
        logger.error(str(e))
    except StopIteration:
        logger.error("Unexpected end of input.")
    except (ValueError, OSError) as e:
        logger.error(str(e))
    return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3

import argparse
import json
import logging
import sys
import time
from typing import Optional, Sequence

from tqdm import tqdm

from babyvm.cpu.baby_cpu import BabyCPU
from babyvm.cpu.cpu import CPUFactory
from babyvm.display import format_state
from babyvm.exceptions import LoaderException
from babyvm.isa.baby import MAX_STORE_SIZE, STORE_SIZE
from babyvm.isa.baby_executor import Signal
from babyvm.isa.baby_isa import BabyInstruction
from babyvm.loader import load_program
from babyvm.serialization import BabyEncoder
from babyvm.state.machine import CycleRecord

logger = logging.getLogger(__name__)

EXIT_STOPPED = 0
EXIT_LOAD_ERROR = 1
EXIT_CYCLE_LIMIT = 2
EXIT_INTERRUPTED = 130


def store_size(text: str) -> int:
    try:
        size = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f'invalid store size: {text!r}') from None
    if not 1 <= size <= MAX_STORE_SIZE:
        raise argparse.ArgumentTypeError(f'store size must be between 1 and {MAX_STORE_SIZE}, got {size}')
    return size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Run a program on a Manchester Baby.')
    parser.add_argument('program', type=str, help='Program file: one line of 32 0/1 characters per store line')
    parser.add_argument(
        '--isa',
        type=str.upper,
        choices=['ORIGINAL', 'EXTENDED'],
        default='EXTENDED',
        help='Instruction set variant.',
    )
    parser.add_argument('--store-size', type=store_size, default=STORE_SIZE, help='Number of words in the store.')
    parser.add_argument('--step', default=False, action='store_true', help='Wait for Enter after every cycle.')
    parser.add_argument('--delay', type=float, default=0.0, help='Seconds to sleep after every cycle.')
    parser.add_argument('--max-cycles', type=int, default=None, help='Give up after this many cycles.')
    parser.add_argument('--fields', default=False, action='store_true', help='Separate instruction fields.')
    parser.add_argument('--disassemble', default=False, action='store_true', help='Disassemble store lines.')
    parser.add_argument('--trace', type=str, default=None, help='Write a JSON trace of every cycle to this file.')
    parser.add_argument('--quiet', default=False, action='store_true', help='Only print the final state.')
    parser.add_argument('--progress', default=False, action='store_true', help='Show a progress bar of cycles.')
    parser.add_argument('-v', '--verbose', default=False, action='store_true', help='Log every cycle.')
    return parser


def print_state(cpu: BabyCPU, args: argparse.Namespace) -> None:
    print(format_state(cpu.machine, cpu.isa, fields=args.fields, disassemble=args.disassemble))
    print('')


def pause(args: argparse.Namespace) -> None:
    if args.delay > 0:
        time.sleep(args.delay)
    if args.step:
        try:
            input()
        except EOFError:
            # stdin exhausted, keep running without pausing
            args.step = False


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    cpu = CPUFactory.create_cpu(args.isa, args.store_size)

    try:
        cpu.load_store(load_program(args.program, args.store_size))
    except LoaderException as e:
        print(str(e), file=sys.stderr)
        return EXIT_LOAD_ERROR

    logger.info(f'Loaded {args.program} for the {cpu.isa.name} instruction set')
    print_state(cpu, args)

    records: list[CycleRecord] = []
    progress = tqdm(total=args.max_cycles, unit='cycle', disable=not args.progress, file=sys.stderr)

    def on_cycle(cycle: int, instruction: BabyInstruction, signal: Signal) -> None:
        progress.update(1)
        if args.trace:
            records.append(
                CycleRecord(
                    cycle=cycle,
                    word=cpu.machine.instruction_register,
                    mnemonic=instruction.mnemonic,
                    stopped=signal is Signal.STOP,
                    state=cpu.machine.copy(),
                ),
            )
        if not args.quiet:
            print_state(cpu, args)
            pause(args)

    try:
        cycles, signal = cpu.run(args.max_cycles, on_cycle)
    except KeyboardInterrupt:
        print('Interrupted', file=sys.stderr)
        return EXIT_INTERRUPTED
    finally:
        progress.close()
        if args.trace:
            print('Writing trace to {}'.format(args.trace))
            with open(args.trace, 'w') as f:
                json.dump(records, f, cls=BabyEncoder, indent=2)

    if args.quiet:
        print_state(cpu, args)

    if signal is Signal.STOP:
        print('Stopped after {} cycles'.format(cycles))
        return EXIT_STOPPED
    print('Cycle limit of {} reached without STP'.format(args.max_cycles), file=sys.stderr)
    return EXIT_CYCLE_LIMIT


if __name__ == '__main__':
    sys.exit(main())

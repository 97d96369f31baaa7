"""
Reference notes for each policy and the plain-language explanation of a
comparison's winner and loser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, Union

from .algorithms import resolve_algorithm
from .models import Algorithm, ComparisonEntry


@dataclass(frozen=True)
class AlgorithmGuide:
    description: str
    basis: str
    example: str
    pros: Tuple[str, ...]
    cons: Tuple[str, ...]


GUIDES: Dict[Algorithm, AlgorithmGuide] = {
    Algorithm.FCFS: AlgorithmGuide(
        description="Runs processes in the exact order they reach the ready queue, like a real-world line.",
        basis="FIFO: sorted purely by arrival time.",
        example="A grocery checkout: the first customer is served first, whatever the size of their cart.",
        pros=("Simple to reason about.", "Fair in terms of arrival order.", "No starvation."),
        cons=("Convoy effect: short jobs get stuck behind long ones.", "High average waiting time."),
    ),
    Algorithm.SJF: AlgorithmGuide(
        description="Picks the waiting process with the smallest burst time and runs it to completion.",
        basis="Greedy: min(burst time).",
        example="Washing a cup before cooking a meal to clear the to-do list faster.",
        pros=("Optimal average waiting time among non-preemptive policies.", "High throughput for short jobs."),
        cons=("Long processes can starve.", "Burst times must be known in advance."),
    ),
    Algorithm.SRTF: AlgorithmGuide(
        description="Preemptive SJF: a newcomer that can finish sooner than the running process takes the CPU.",
        basis="Dynamic greedy: min(remaining time).",
        example="Pausing a long report to answer a quick, urgent email that just arrived.",
        pros=("Lowest average waiting time.", "Very responsive to short jobs."),
        cons=("Frequent context switches.", "Long processes can starve."),
    ),
    Algorithm.PRIORITY_NP: AlgorithmGuide(
        description="Picks the ready process with the highest priority (lowest number) and runs it to completion.",
        basis="Rank by importance: min(priority).",
        example="Priority passengers board before economy, whenever they arrived.",
        pros=("Critical work is handled first.", "Flexible policy definition."),
        cons=("Low-priority jobs can block indefinitely.",),
    ),
    Algorithm.PRIORITY_P: AlgorithmGuide(
        description="Like Priority, but the running process is stopped as soon as a more important one is ready.",
        basis="Real-time urgency: min(priority), re-checked every time unit.",
        example="An ambulance siren makes regular traffic pull over immediately.",
        pros=("Immediate response for critical tasks.",),
        cons=("Frequent interruptions.", "High starvation risk."),
    ),
    Algorithm.ROUND_ROBIN: AlgorithmGuide(
        description="Each process gets a fixed time slice; unfinished work goes to the back of the queue.",
        basis="Time sharing, cyclic over the ready queue.",
        example="A board game where every player gets a strict one-minute turn.",
        pros=("Fair CPU allocation.", "Good response time for interactive work."),
        cons=("Performance depends heavily on the quantum.", "High turnaround for long jobs."),
    ),
    Algorithm.LJF: AlgorithmGuide(
        description="Picks the waiting process with the largest burst time and runs it to completion.",
        basis="max(burst time).",
        example="Tackling the biggest project first to get it out of the way.",
        pros=("Short processes cannot dominate the CPU.",),
        cons=("Worst average waiting time.", "Short jobs starve."),
    ),
    Algorithm.LRTF: AlgorithmGuide(
        description="Preemptively switches to the process with the most work left.",
        basis="max(remaining time), re-checked every time unit.",
        example="Constantly switching between piles of work to keep them all the same size.",
        pros=("Balances remaining work among large tasks.",),
        cons=("Very inefficient.", "Maximizes context switching."),
    ),
    Algorithm.HRRN: AlgorithmGuide(
        description="Non-preemptive; the response ratio of a process grows the longer it waits.",
        basis="Aging: ratio = (waiting + burst) / burst.",
        example="Someone who waited an hour for a coffee is served before a newcomer ordering a feast.",
        pros=("No starvation thanks to aging.", "Balances short and long jobs."),
        cons=("The ratio must be recomputed at every decision.",),
    ),
    Algorithm.MLQ: AlgorithmGuide(
        description="Splits the ready queue into a system queue (round robin) and a user queue (FCFS).",
        basis="Static classification by priority.",
        example="Airport security: a fast crew lane next to the general boarding lane.",
        pros=("Organized structure.", "Low overhead."),
        cons=("Inflexible.", "The user queue can starve."),
    ),
    Algorithm.MLFQ: AlgorithmGuide(
        description="Processes that use up their slice sink to lower queues with longer quanta.",
        basis="Dynamic adjustment from past CPU usage.",
        example="Tiered support: simple issues stay at tier 1, complex ones are escalated.",
        pros=("Flexible.", "Short and interactive jobs finish in the top queue."),
        cons=("Hardest to implement and tune.",),
    ),
}


def guide_for(name: Union[Algorithm, str]) -> AlgorithmGuide:
    return GUIDES[resolve_algorithm(name)]


def comparison_analysis(winner: ComparisonEntry, loser: ComparisonEntry) -> Tuple[str, str]:
    """
    Explain in plain words why ``winner`` ranked first and ``loser`` last.
    """
    if winner.algorithm in (Algorithm.SJF, Algorithm.SRTF):
        winner_text = (
            "By favouring shorter jobs it kept the queue from building up, which cut the "
            "waiting time of most processes."
        )
    elif winner.algorithm in (Algorithm.PRIORITY_NP, Algorithm.PRIORITY_P):
        winner_text = (
            "Its order matched the process priorities, so the critical tasks finished early "
            "and pulled the average down."
        )
    elif winner.algorithm is Algorithm.ROUND_ROBIN:
        winner_text = (
            "The quantum suited this workload: the CPU was shared fairly and no single process "
            "blocked the others."
        )
    else:
        winner_text = "Given these arrival times and burst lengths, its selection rule happened to fit best."

    if loser.algorithm in (Algorithm.LJF, Algorithm.LRTF):
        loser_text = (
            "By favouring long jobs it made the short processes wait, which inflated the "
            "average turnaround time."
        )
    elif loser.algorithm is Algorithm.FCFS:
        loser_text = (
            "It likely suffered from the convoy effect: a long process arrived early and held up "
            "the shorter ones behind it."
        )
    else:
        loser_text = "Its selection rule fit this workload poorly, causing extra waiting or context switches."

    return winner_text, loser_text

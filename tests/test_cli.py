from pathlib import Path

from scheduler_sim.cli import build_parser, config_from_args, main


def test_generate_run_and_compare(tmp_path: Path):
    workload = tmp_path / "w.json"
    assert main(["generate", "-n", "4", "-s", "9", "-o", str(workload)]) == 0
    assert workload.exists()

    assert main(["run", "-a", "sjf", "-p", "-w", str(workload)]) == 0
    assert main(["run", "-a", "rr", "-q", "3", "-w", str(workload)]) == 0
    assert main(["compare", "-w", str(workload)]) == 0


def test_unknown_algorithm_reports_error(tmp_path: Path):
    workload = tmp_path / "w.csv"
    workload.write_text("pid,arrival_time,burst_time\n1,0,3\n")
    assert main(["run", "-a", "lottery", "-w", str(workload)]) == 1


def test_stuck_run_exit_code(tmp_path: Path):
    workload = tmp_path / "w.csv"
    workload.write_text("pid,arrival_time,burst_time\n1,0,30\n")
    assert main(["run", "-a", "fcfs", "--max-ticks", "5", "-w", str(workload)]) == 2


def test_config_from_args():
    args = build_parser().parse_args(["run", "-a", "rr", "-w", "x.json", "-q", "7", "--merge-slices"])
    config = config_from_args(args)
    assert config.time_quantum == 7
    assert config.merge_quantum_slices is True
    assert config.max_processes == 100

from siggen.worker.main import SignalWorker, main, run_worker

__all__ = ["SignalWorker", "main", "run_worker"]

from backend.engine.gameplay.game import GamePlay, SolveReport

__all__ = ["GamePlay", "SolveReport"]

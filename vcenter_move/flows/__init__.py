from .move_flow import MoveResult, VCenterMoveFlow

__all__ = (MoveResult, VCenterMoveFlow)

from lbtree.services.alb.cli.tree import tree as alb_tree

__all__ = ["alb_tree"]

from lbtree.services.ecs.cli.tree import tree as ecs_tree

__all__ = ["ecs_tree"]

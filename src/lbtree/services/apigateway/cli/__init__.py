from lbtree.services.apigateway.cli.tree import tree as apigateway_tree

__all__ = ["apigateway_tree"]

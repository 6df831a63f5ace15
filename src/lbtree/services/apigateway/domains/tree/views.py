from lbtree.core.present import PresentView, fmt


class RestApiView(PresentView):
    indent = 0

    def content(self) -> str:
        return (
            f'REST API "{fmt(self.resource.get("name"))}" '
            f"({fmt(self.resource.get('id'))})"
        )


class ResourceView(PresentView):
    indent = 2

    def content(self) -> str:
        return (
            f"{fmt(self.resource.get('path'), '/')} "
            f"(id={fmt(self.resource.get('id'))})"
        )


class MethodView(PresentView):
    indent = 4

    def content(self) -> str:
        return (
            f"{fmt(self.resource.get('httpMethod'))} "
            f"auth={fmt(self.resource.get('authorizationType'), 'NONE')}"
        )


class IntegrationView(PresentView):
    indent = 6

    def content(self) -> str:
        return (
            f"Integration type={fmt(self.resource.get('type'))} "
            f"uri={fmt(self.resource.get('uri'), 'none')}"
        )

"""Tests for switchyard.controller."""

from switchyard.controller import Controller, SupportsData


class TestController:
    def test_defaults(self) -> None:
        controller = Controller()
        assert controller.data == {}
        assert controller.template is None

    def test_set_data_copies(self) -> None:
        source = {"q": "lamp"}
        controller = Controller()
        controller.set_data(source)
        source["q"] = "changed"
        assert controller.data == {"q": "lamp"}

    def test_set_template(self) -> None:
        controller = Controller()
        controller.set_template("products/show.html")
        assert controller.template == "products/show.html"


class TestSupportsData:
    def test_controller_base_conforms(self) -> None:
        assert isinstance(Controller(), SupportsData)

    def test_duck_typed_controller_conforms(self) -> None:
        class Plain:
            def set_data(self, data) -> None:
                self.data = data

        assert isinstance(Plain(), SupportsData)

    def test_object_without_set_data(self) -> None:
        assert not isinstance(object(), SupportsData)

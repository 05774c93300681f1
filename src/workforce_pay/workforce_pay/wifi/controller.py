from __future__ import annotations

from flask import Flask

from ..common.http import current_identity, json_body, ok, required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.wifi_service

    @app.route("/api/organizations/<int:organization_id>/wifi", methods=["GET"], endpoint="wifi_list")
    def list_networks(organization_id: int):
        current_identity()
        return ok(service.list_networks(organization_id))

    @app.route("/api/organizations/<int:organization_id>/wifi", methods=["POST"], endpoint="wifi_add")
    def add_network(organization_id: int):
        caller_id, role = current_identity()
        data = json_body()
        network_id = service.add_network(
            current_role=role,
            organization_id=organization_id,
            ssid=required(data, "ssid"),
            created_by=caller_id,
            description=data.get("description"),
        )
        return ok({"network_id": network_id}, 201)

    @app.route("/api/wifi/<int:network_id>", methods=["PUT"], endpoint="wifi_update")
    def update_network(network_id: int):
        _, role = current_identity()
        data = json_body()
        service.update_network(
            current_role=role,
            network_id=network_id,
            ssid=data.get("ssid"),
            description=data.get("description"),
            is_active=data.get("is_active"),
        )
        return ok()

    @app.route("/api/wifi/<int:network_id>", methods=["DELETE"], endpoint="wifi_delete")
    def delete_network(network_id: int):
        _, role = current_identity()
        service.delete_network(current_role=role, network_id=network_id)
        return ok()

    @app.route("/api/employees/<int:user_id>/wifi-requirement", methods=["PUT"], endpoint="wifi_requirement")
    def set_requirement(user_id: int):
        _, role = current_identity()
        data = json_body()
        service.set_employee_requirement(current_role=role, user_id=user_id, required=bool(data.get("required")))
        return ok()

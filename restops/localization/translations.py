"""Message catalogs keyed by locale."""

TRANSLATIONS = {
    "en": {
        "errors.login_required": "login required",
        "errors.resource_not_found": "Resource not found",
        "errors.validation_error": "Validation error",
        "errors.instance_not_found": "Checklist not found",
        "errors.item_not_found": "Checklist item not found",
        "errors.connection_not_found": "Connected item not found",
        "errors.connected_entity_not_found": "{item_type} not found",
        "errors.unsupported_item_type": "Unsupported item type: {item_type}",
        "errors.instance_id_required": "instance_id is required",
        "errors.toggle_fields_required": "instance_id and is_completed are required",
        "errors.toggle_target_required": "Either item_id or connection_id is required",
        "errors.item_not_leaf": "Items with sub-items or connected items are completed automatically",
        "errors.instance_already_submitted": "This checklist has already been submitted",
        "errors.items_incomplete": "All items must be completed before submitting",
        "errors.connections_incomplete": "All connected items must be completed before submitting",
        "errors.invalid_credentials": "Incorrect employee code or password",
        "errors.progress_fetch_failed": "Failed to load checklist progress",
        "errors.progress_update_failed": "Failed to update checklist progress",
        "errors.submission_failed": "Failed to submit checklist",
        "errors.submission_list_failed": "Failed to load submissions",
        "errors.connected_item_fetch_failed": "Failed to load connected item",
        "errors.checklist_list_failed": "Failed to load checklists",
        "errors.inventory_fields_required": "item_id and current_stock are required",
        "errors.inventory_stock_invalid": "current_stock must not be negative",
        "errors.inventory_item_not_found": "Inventory item not found",
        "errors.inventory_update_failed": "Failed to update inventory",
        "errors.inventory_fetch_failed": "Failed to load inventory",
        "mail.submission_subject": "[{tenant}] {template} submitted ({date})",
    },
    "ko": {
        "errors.login_required": "로그인이 필요합니다.",
        "errors.resource_not_found": "리소스를 찾을 수 없습니다.",
        "errors.validation_error": "입력값이 올바르지 않습니다.",
        "errors.instance_not_found": "체크리스트를 찾을 수 없습니다.",
        "errors.item_not_found": "항목을 찾을 수 없습니다.",
        "errors.connection_not_found": "연결항목을 찾을 수 없습니다.",
        "errors.instance_id_required": "instance_id가 필요합니다.",
        "errors.toggle_fields_required": "instance_id, is_completed가 필요합니다.",
        "errors.toggle_target_required": "item_id 또는 connection_id 중 하나가 필요합니다.",
        "errors.item_not_leaf": "하위 항목이나 연결항목이 있는 항목은 자동으로 완료됩니다.",
        "errors.instance_already_submitted": "이미 제출된 체크리스트입니다.",
        "errors.items_incomplete": "모든 항목을 완료해야 제출할 수 있습니다.",
        "errors.connections_incomplete": "연결 항목까지 완료해야 제출할 수 있습니다.",
        "errors.invalid_credentials": "직원 코드 또는 비밀번호가 올바르지 않습니다.",
        "errors.progress_fetch_failed": "조회 실패",
        "errors.progress_update_failed": "업데이트 실패",
        "errors.submission_failed": "제출 실패",
        "errors.inventory_fields_required": "item_id, current_stock가 필요합니다.",
        "errors.inventory_stock_invalid": "재고 수량은 0 이상이어야 합니다.",
        "errors.inventory_item_not_found": "재고 아이템을 찾을 수 없습니다.",
        "errors.inventory_update_failed": "업데이트 실패",
        "errors.inventory_fetch_failed": "조회 실패",
    },
}

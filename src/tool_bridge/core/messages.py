"""User-facing message catalog.

Every ``message`` placed in a response envelope is rendered from here. The
deployment locale is Vietnamese; machine-oriented ``error`` strings stay in
English.
"""

from typing import Any

MESSAGES: dict[str, str] = {
    # configuration / input
    "config_missing": "{service} chưa được cấu hình. Cần set {settings}",
    "invalid_input": "Tham số không hợp lệ: {detail}",
    "unknown_tool": "Tool không tồn tại: {name}",
    "unexpected": "Đã xảy ra lỗi không mong muốn khi thực thi tool {name}",
    "transport_failed": "Không thể kết nối tới {service}: {detail}",
    # redmine
    "redmine_created": "Đã tạo issue #{issue_id} thành công",
    "redmine_failed": "Lỗi khi tạo issue: {detail}",
    # smart light
    "light_on": "Đã bật đèn với độ sáng {brightness}%",
    "light_off": "Đã tắt đèn",
    "light_invalid": "Hành động không hợp lệ: {action}",
    "light_brightness_invalid": "Độ sáng không hợp lệ: {brightness}. Chỉ chấp nhận 0-100",
    # gitlab
    "gitlab_mr_listed": "Tìm thấy {count} merge request ({state})",
    "gitlab_changes": "Đã lấy thay đổi của merge request !{mr_iid}",
    "gitlab_notes": "Tìm thấy {count} bình luận trên merge request !{mr_iid}",
    "gitlab_commits": "Tìm thấy {count} commit trong merge request !{mr_iid}",
    "gitlab_note_posted": "Đã thêm bình luận vào merge request !{mr_iid}",
    "gitlab_inline_posted": "Đã thêm bình luận inline vào merge request !{mr_iid}",
    "gitlab_approved": "Đã approve merge request !{mr_iid}",
    "gitlab_failed": "Lỗi GitLab: {detail}",
    # mcp
    "mcp_ok": "Đã thực thi tool thành công",
    "mcp_failed": "Lỗi khi gọi MCP tool: {detail}",
    "mcp_tools_listed": "Tìm thấy {count} tool trên MCP server",
}


def render(key: str, **kwargs: Any) -> str:
    """Format the catalog entry ``key`` with ``kwargs``.

    Raises:
        KeyError: If ``key`` is not in the catalog.
    """
    return MESSAGES[key].format(**kwargs)

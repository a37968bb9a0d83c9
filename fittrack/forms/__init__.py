"""表单层: 声明式字段定义与递归校验."""

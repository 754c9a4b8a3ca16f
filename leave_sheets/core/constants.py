"""
Sheet names, column layouts and seed data.

The seed values are reproduced exactly so that sheets created by earlier
deployments and by this service stay interchangeable.
"""

class SheetNames:
    USERS = "Users"
    LEAVES = "Leaves"
    SETTINGS = "Settings"
    HOLIDAYS = "Holidays"

    ALL = (USERS, LEAVES, SETTINGS, HOLIDAYS)


# Quota handed to a new employee when the admin leaves a field empty.
# 999 means "effectively unlimited".
DEFAULT_QUOTAS = {
    "leave_quota": 10,
    "sick_leave_quota": 30,
    "personal_leave_quota": 6,
    "maternity_leave_quota": 120,
    "sterilization_leave_quota": 999,
    "unpaid_leave_quota": 999,
    "compassionate_leave_quota": 3,
}

# Fallbacks used when decoding a blank or garbled quota cell.
# Older categories fall back to 0, categories added later to their default.
DECODE_QUOTA_FALLBACKS = {
    "leave_quota": 0,
    "sick_leave_quota": 0,
    "personal_leave_quota": 0,
    "maternity_leave_quota": DEFAULT_QUOTAS["maternity_leave_quota"],
    "sterilization_leave_quota": DEFAULT_QUOTAS["sterilization_leave_quota"],
    "unpaid_leave_quota": DEFAULT_QUOTAS["unpaid_leave_quota"],
    "compassionate_leave_quota": DEFAULT_QUOTAS["compassionate_leave_quota"],
}

USER_HEADERS = [
    "empId",
    "name",
    "password",
    "role",
    "leaveQuota",
    "sickLeaveQuota",
    "personalLeaveQuota",
    "maternityLeaveQuota",
    "sterilizationLeaveQuota",
    "unpaidLeaveQuota",
    "compassionateLeaveQuota",
    "isRegistered",
    "createdAt",
]

LEAVE_HEADERS = [
    "id",
    "empId",
    "type",
    "startDate",
    "endDate",
    "totalDays",
    "reason",
    "status",
    "approverNote",
    "createdAt",
    "updatedAt",
]

SETTING_HEADERS = ["key", "value", "year"]

HOLIDAY_HEADERS = ["date", "name"]

ADMIN_EMP_ID = "ADMIN001"

DEFAULT_ADMIN = {
    "emp_id": ADMIN_EMP_ID,
    "name": "ผู้ดูแลระบบ",
    "role": "admin",
    "leave_quota": 0,
    "sick_leave_quota": 0,
    "personal_leave_quota": 0,
    "maternity_leave_quota": 0,
    "sterilization_leave_quota": 0,
    "unpaid_leave_quota": 0,
    "compassionate_leave_quota": 0,
    "is_registered": True,
}

# Policy keys stored in the Settings sheet, with their defaults.
# Order matters: it is the order rows are seeded in.
DEFAULT_POLICY = {
    "annualLeaveMax": 10,
    "sickLeaveMax": 30,
    "personalLeaveMax": 6,
    "maternityLeaveMax": 120,
    "sterilizationLeaveMax": 999,
    "unpaidLeaveMax": 999,
    "compassionateLeaveMax": 3,
    "minAdvanceNoticeDays": 3,
    "carryOverEnabled": False,
    "carryOverMaxDays": 5,
}

# Thai public holidays 2025
DEFAULT_HOLIDAYS_2025 = [
    ("2025-01-01", "วันขึ้นปีใหม่"),
    ("2025-02-12", "วันตรุษจีน"),
    ("2025-04-06", "วันจักรี"),
    ("2025-04-13", "วันสงกรานต์"),
    ("2025-04-14", "วันสงกรานต์"),
    ("2025-04-15", "วันสงกรานต์"),
    ("2025-05-01", "วันแรงงานแห่งชาติ"),
    ("2025-05-05", "วันฉัตรมงคล"),
    ("2025-05-12", "วันพืชมงคล (ชดเชย)"),
    ("2025-06-03", "วันเฉลิมพระชนมพรรษาสมเด็จพระนางเจ้าสุทิดา"),
    ("2025-07-28", "วันเฉลิมพระชนมพรรษาพระบาทสมเด็จพระเจ้าอยู่หัว"),
    ("2025-07-29", "วันเฉลิมพระชนมพรรษาพระบาทสมเด็จพระเจ้าอยู่หัว (ชดเชย)"),
    ("2025-08-12", "วันแม่แห่งชาติ"),
    ("2025-10-13", "วันคล้ายวันสวรรคตพระบาทสมเด็จพระบรมชนกาธิเบศร มหาภูมิพลอดุลยเดชมหาราช บรมนาถบพิตร"),
    ("2025-10-23", "วันปิยมหาราช"),
    ("2025-12-05", "วันพ่อแห่งชาติ"),
    ("2025-12-10", "วันรัฐธรรมนูญ"),
    ("2025-12-31", "วันสิ้นปี"),
]

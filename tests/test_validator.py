import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from data_alchemist.samples import SAMPLE_CLIENTS, SAMPLE_TASKS, SAMPLE_WORKERS
from data_alchemist.validator import issues_for_cell, summarize_issues, validate


def make_client(**overrides):
    client = {
        "ClientID": "C1",
        "ClientName": "Acme",
        "PriorityLevel": 3,
        "RequestedTaskIDs": [],
        "GroupTag": "Enterprise",
        "AttributesJSON": "",
    }
    client.update(overrides)
    return client


def make_task(**overrides):
    task = {
        "TaskID": "T1",
        "TaskName": "Build",
        "Category": "Dev",
        "Duration": 2,
        "RequiredSkills": [],
        "PreferredPhases": [],
        "MaxConcurrent": 1,
    }
    task.update(overrides)
    return task


class ValidatorTests(unittest.TestCase):
    def test_sample_data_is_clean(self):
        self.assertEqual(validate(SAMPLE_CLIENTS, SAMPLE_WORKERS, SAMPLE_TASKS), [])

    def test_broken_client_produces_three_errors(self):
        client = {"ClientID": "", "PriorityLevel": 6, "RequestedTaskIDs": ["T99"]}
        issues = validate([client], [], [])

        self.assertEqual(
            [issue.id for issue in issues],
            ["client-0-id", "client-0-priority", "client-0-task-T99"],
        )
        self.assertTrue(all(issue.type == "error" for issue in issues))
        self.assertEqual([issue.field for issue in issues], ["ClientID", "PriorityLevel", "RequestedTaskIDs"])
        self.assertIn("T99", issues[2].message)
        self.assertIsNotNone(issues[2].suggestion)

    def test_priority_bounds_are_inclusive(self):
        clients = [make_client(PriorityLevel=level) for level in (0, 1, 5, 6)]
        issues = validate(clients, [], [])
        self.assertEqual([issue.id for issue in issues], ["client-0-priority", "client-3-priority"])

    def test_missing_fields_do_not_raise(self):
        issues = validate([{"ClientID": "C1"}], [{}], [{"TaskID": "T1"}])
        self.assertEqual(issues, [])

    def test_one_issue_per_missing_reference(self):
        clients = [
            make_client(RequestedTaskIDs=["T9", "T1", "T9"]),
            make_client(ClientID="C2", RequestedTaskIDs=["T9"]),
        ]
        issues = validate(clients, [], [make_task()])
        self.assertEqual(
            [issue.id for issue in issues],
            ["client-0-task-T9", "client-0-task-T9", "client-1-task-T9"],
        )

    def test_uncovered_skill_is_a_single_warning(self):
        tasks = [make_task(RequiredSkills=["Rust"])]
        workers = [{"WorkerID": "W1", "Skills": ["Python"]}]
        issues = validate([], workers, tasks)

        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].type, "warning")
        self.assertEqual(issues[0].id, "task-0-skill-Rust")
        self.assertIn("Rust", issues[0].message)

    def test_duration_minimum(self):
        issues = validate([], [], [make_task(Duration=0), make_task(TaskID="T2", Duration=1)])
        self.assertEqual([issue.id for issue in issues], ["task-0-duration"])

    def test_clients_come_before_tasks(self):
        issues = validate(
            [make_client(ClientID="")],
            [],
            [make_task(Duration=0, RequiredSkills=["Go"])],
        )
        self.assertEqual(
            [issue.id for issue in issues],
            ["client-0-id", "task-0-duration", "task-0-skill-Go"],
        )

    def test_summary_and_cell_lookup(self):
        issues = validate(
            [make_client(ClientID="", PriorityLevel=9)],
            [],
            [make_task(RequiredSkills=["Go"])],
        )
        self.assertEqual(summarize_issues(issues), {"errors": 2, "warnings": 1})
        cell = issues_for_cell(issues, 0, "PriorityLevel")
        self.assertEqual([issue.id for issue in cell], ["client-0-priority"])

    def test_to_dict_uses_camel_case_row_index(self):
        issue = validate([make_client(ClientID="")], [], [])[0]
        self.assertEqual(
            issue.to_dict(),
            {
                "id": "client-0-id",
                "type": "error",
                "message": "Client ID is required",
                "field": "ClientID",
                "rowIndex": 0,
            },
        )


if __name__ == "__main__":
    unittest.main()

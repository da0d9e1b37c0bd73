import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from data_alchemist.parser import coerce_value, parse_text, tokenize_line


class TokenizeLineTests(unittest.TestCase):
    def test_quoted_comma_does_not_split(self):
        self.assertEqual(tokenize_line('"a,b",c'), ["a,b", "c"])

    def test_doubled_quote_is_literal(self):
        self.assertEqual(tokenize_line('"he said ""hi"""'), ['he said "hi"'])

    def test_unquoted_fields_are_trimmed(self):
        self.assertEqual(tokenize_line("  a , b ,c  "), ["a", "b", "c"])

    def test_trailing_comma_yields_empty_field(self):
        self.assertEqual(tokenize_line("a,b,"), ["a", "b", ""])

    def test_quotes_in_middle_toggle_without_splitting(self):
        self.assertEqual(tokenize_line('x"y,z"w,v'), ["xy,zw", "v"])


class CoercionTests(unittest.TestCase):
    def test_list_headers_split_on_semicolons(self):
        self.assertEqual(coerce_value("Skills", " Python ; SQL;; "), ["Python", "SQL"])
        self.assertEqual(coerce_value("RequestedTaskIDs", "T1;T2"), ["T1", "T2"])
        self.assertEqual(coerce_value("PreferredPhases", "1;2"), ["1", "2"])

    def test_empty_list_cell_is_empty_list(self):
        for header in ("Skills", "RequestedTaskIDs", "PreferredPhases"):
            with self.subTest(header=header):
                self.assertEqual(coerce_value(header, ""), [])

    def test_slots_accept_array_literal(self):
        self.assertEqual(coerce_value("AvailableSlots", "[1,2,3]"), [1, 2, 3])

    def test_slots_fallback_drops_invalid_and_zero_pieces(self):
        self.assertEqual(coerce_value("AvailableSlots", "1;2;x"), [1, 2])
        self.assertEqual(coerce_value("AvailableSlots", "0;4"), [4])
        self.assertEqual(coerce_value("AvailableSlots", ""), [])

    def test_slots_scalar_json_falls_back_to_split(self):
        self.assertEqual(coerce_value("AvailableSlots", "5"), [5])

    def test_integer_headers(self):
        self.assertEqual(coerce_value("PriorityLevel", "4"), 4)
        self.assertEqual(coerce_value("Duration", "abc"), 0)
        self.assertEqual(coerce_value("MaxLoadPerPhase", "3 tasks"), 3)
        self.assertEqual(coerce_value("MaxConcurrent", "-2"), -2)

    def test_integer_headers_only_read_ascii_digits(self):
        self.assertEqual(coerce_value("Duration", "٣"), 0)
        self.assertEqual(coerce_value("PriorityLevel", "2٣"), 2)
        self.assertEqual(coerce_value("AvailableSlots", "٢;3"), [3])

    def test_list_markers_take_priority_over_integer_markers(self):
        # "RequiredSkillsLevel" contains both "Skills" and "Level"
        self.assertEqual(coerce_value("RequiredSkillsLevel", "a;b"), ["a", "b"])

    def test_other_headers_stay_strings(self):
        self.assertEqual(coerce_value("ClientName", "  Acme  "), "Acme")


class ParseTextTests(unittest.TestCase):
    def test_empty_and_blank_text_yield_no_records(self):
        self.assertEqual(parse_text(""), [])
        self.assertEqual(parse_text("\n  \r\n\t\n"), [])

    def test_header_only_yields_no_records(self):
        self.assertEqual(parse_text("ClientID,ClientName\n"), [])

    def test_bom_null_bytes_and_crlf_are_normalised(self):
        clean = parse_text("ClientID,ClientName\nC1,Acme\n")
        messy = parse_text("\ufeffClientID,Client\x00Name\r\n\r\nC1,Ac\x00me\r\n")
        self.assertEqual(messy, clean)

    def test_rows_zip_with_headers_and_pad_missing_values(self):
        records = parse_text(
            "TaskID,TaskName,Duration,RequiredSkills\n"
            "T1,Build\n"
        )
        self.assertEqual(
            records,
            [{"TaskID": "T1", "TaskName": "Build", "Duration": 0, "RequiredSkills": []}],
        )

    def test_extra_values_are_ignored(self):
        records = parse_text("ClientID\nC1,extra\n")
        self.assertEqual(records, [{"ClientID": "C1"}])

    def test_quoted_header_tokens_lose_quotes(self):
        records = parse_text('"ClientID","Client ""Name"""\nC1,Acme\n')
        self.assertEqual(list(records[0].keys()), ["ClientID", "Client Name"])

    def test_quoted_values_keep_escaped_quotes(self):
        records = parse_text(
            'ClientID,AttributesJSON\n'
            'C1,"{""budget"": 100, ""tags"": ""a,b""}"\n'
        )
        self.assertEqual(records[0]["AttributesJSON"], '{"budget": 100, "tags": "a,b"}')

    def test_worker_row_is_fully_typed(self):
        records = parse_text(
            "WorkerID,WorkerName,Skills,AvailableSlots,MaxLoadPerPhase,WorkerGroup,QualificationLevel\n"
            'W1,Ada,Python;SQL,"[1,3]",2,Backend,5\n'
        )
        self.assertEqual(
            records[0],
            {
                "WorkerID": "W1",
                "WorkerName": "Ada",
                "Skills": ["Python", "SQL"],
                "AvailableSlots": [1, 3],
                "MaxLoadPerPhase": 2,
                "WorkerGroup": "Backend",
                "QualificationLevel": 5,
            },
        )

    def test_row_order_is_preserved(self):
        records = parse_text("ClientID\nC3\nC1\nC2\n")
        self.assertEqual([record["ClientID"] for record in records], ["C3", "C1", "C2"])


if __name__ == "__main__":
    unittest.main()

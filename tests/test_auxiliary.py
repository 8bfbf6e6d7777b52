from auxiliary import bytes_to_megabytes, format_path_for_display


def test_bytes_to_megabytes_is_decimal():
    assert bytes_to_megabytes(100_000_000) == 100
    assert bytes_to_megabytes(1_048_576) > 1
    assert bytes_to_megabytes(999_999) < 1


def test_format_path_for_display():
    assert format_path_for_display("/home/me/repo", home_path="/home/me") == "~/repo"
    assert format_path_for_display("/srv/repo", home_path="/home/me") == "/srv/repo"
    assert format_path_for_display("/srv/repo", home_path="") == "/srv/repo"

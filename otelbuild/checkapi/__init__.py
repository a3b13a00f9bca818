"""Go declaration parsing and checks of Go modules' exported API against a YAML configuration."""
from ollama_console.use_cases.get_health import GetHealth


class HealthController:
    def __init__(self, get_health_use_case: GetHealth):
        self.get_health_use_case = get_health_use_case

    def health(self) -> dict:
        return self.get_health_use_case.execute()
